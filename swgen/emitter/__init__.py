"""Program emission for swgen.

Public Interface:
    - render: Render a manifest into the service worker program
    - render_constants: Render only the constants block
    - ProtocolEmitter: Injectable wrapper around render
    - render_client_script: Render the page-side registration script
"""

from .client import render_client_script
from .renderer import ProtocolEmitter
from .renderer import render
from .renderer import render_constants

__all__ = [
    "render",
    "render_constants",
    "ProtocolEmitter",
    "render_client_script",
]
