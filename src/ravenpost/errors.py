from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RavenpostError(Exception):
    """Base class for ravenpost errors."""


class DsnError(RavenpostError, ValueError):
    """The DSN string could not be parsed."""


class ProtocolError(RavenpostError):
    """The ingestion endpoint answered with a body we cannot use."""


class FaultKind(str, Enum):
    """Why a send failed. Callers only ever see None; the kind is for fault handlers."""

    PREPARATION = "preparation"
    SERIALIZATION = "serialization"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    PROTOCOL = "protocol"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class SendFault:
    """One failed send, as passed to the fault handler."""

    kind: FaultKind
    error: BaseException
    message: str

    @classmethod
    def from_exception(cls, kind: FaultKind, error: BaseException) -> "SendFault":
        return cls(kind=kind, error=error, message=str(error) or type(error).__name__)


@dataclass(frozen=True)
class SendResult:
    """Outcome of one delivery attempt. At most one of the fields is set."""

    event_id: str | None = None
    fault: SendFault | None = None

    @classmethod
    def failed(cls, kind: FaultKind, error: BaseException) -> "SendResult":
        return cls(fault=SendFault.from_exception(kind, error))
