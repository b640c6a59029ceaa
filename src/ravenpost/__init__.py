__version__ = "0.1.0"

from .auth import create_auth_header
from .client import RavenClient, log_fault
from .config import Settings
from .content import CompressedContent, StringContent
from .dsn import Dsn
from .errors import DsnError, FaultKind, ProtocolError, RavenpostError, SendFault, SendResult
from .packet import ErrorLevel, JsonPacket, JsonPacketFactory, PacketFactory, SentryMessage
from .response import decode_event_id
from .scrubber import LogScrubber, PatternScrubber

__all__ = [
    "__version__",
    "CompressedContent",
    "Dsn",
    "DsnError",
    "ErrorLevel",
    "FaultKind",
    "JsonPacket",
    "JsonPacketFactory",
    "LogScrubber",
    "PacketFactory",
    "PatternScrubber",
    "ProtocolError",
    "RavenClient",
    "RavenpostError",
    "SendFault",
    "SendResult",
    "SentryMessage",
    "Settings",
    "StringContent",
    "create_auth_header",
    "decode_event_id",
    "log_fault",
]
