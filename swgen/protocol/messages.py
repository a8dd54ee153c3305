"""Vocabulary shared by the generated worker and the page script."""

import json
from enum import Enum
from typing import Any

# The only command the worker accepts from a page.
SKIP_WAITING = "skip_waiting"

# Sent as a "msg" payload once skipWaiting() resolved.
WAIT_FINISHED = "wait_finished"


class LifecycleState(str, Enum):
    """Worker lifecycle as seen by the host.

    State transitions:
    - IDLE -> INSTALLING: install event dispatched
    - INSTALLING -> INSTALLED: every cache-first resource cached
    - INSTALLING -> REDUNDANT: install failed, host retries later
    - INSTALLED -> ACTIVATING: no older version controls a client, or skip_waiting
    - ACTIVATING -> ACTIVATED: cleanup finished, clients claimed
    """

    IDLE = "idle"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVATED = "activated"
    REDUNDANT = "redundant"


class MessageType(str, Enum):
    """Envelope types sent from the worker to pages."""

    MSG = "msg"
    INSTALL_DONE = "install_done"
    ACTIVATION_DONE = "activation_done"


def envelope(message_type: MessageType, *data: Any) -> str:
    """Encode a worker -> page message.

    Example:
        >>> envelope(MessageType.INSTALL_DONE)
        '{"type":"install_done","data":[]}'
    """
    return json.dumps({"type": message_type.value, "data": list(data)}, separators=(",", ":"))
