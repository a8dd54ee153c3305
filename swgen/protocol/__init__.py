"""Runtime caching protocol.

Public Interface:
    - SKIP_WAITING / WAIT_FINISHED: Handshake strings
    - LifecycleState: Worker lifecycle states
    - MessageType: Worker -> page envelope types
    - envelope: Encode a worker -> page message
    - ProtocolModel: Executable model of the worker's event handlers
    - CacheStorage, Response, NetworkError: Model collaborators
"""

from .messages import SKIP_WAITING
from .messages import WAIT_FINISHED
from .messages import LifecycleState
from .messages import MessageType
from .messages import envelope
from .model import CacheStorage
from .model import NetworkError
from .model import ProtocolModel
from .model import Response

__all__ = [
    "SKIP_WAITING",
    "WAIT_FINISHED",
    "LifecycleState",
    "MessageType",
    "envelope",
    "ProtocolModel",
    "CacheStorage",
    "Response",
    "NetworkError",
]
