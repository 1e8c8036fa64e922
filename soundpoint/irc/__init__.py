"""IRC subsystem package.

Contains the line formatter, transports, classifier, membership tracker and
the chat session that ties them together.
"""

from .classifier import MessageClassifier, classify  # noqa: F401
from .membership import MembershipTracker  # noqa: F401
from .models import (  # noqa: F401
    ChatMessage,
    ClassifiedEvent,
    ConnectionState,
    KeepAlivePing,
    SelfJoinAck,
    SelfPartAck,
    Unrecognized,
    normalize_channel,
)
from .session import TwitchSession, connect  # noqa: F401
from .transport import (  # noqa: F401
    LineTransport,
    StreamLineTransport,
    WebSocketLineTransport,
    create_transport,
)

__all__ = [
    "ChatMessage",
    "ClassifiedEvent",
    "ConnectionState",
    "KeepAlivePing",
    "LineTransport",
    "MembershipTracker",
    "MessageClassifier",
    "SelfJoinAck",
    "SelfPartAck",
    "StreamLineTransport",
    "TwitchSession",
    "Unrecognized",
    "WebSocketLineTransport",
    "classify",
    "connect",
    "create_transport",
    "normalize_channel",
]
