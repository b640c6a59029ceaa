"""Event packets and the factory that builds them from exceptions and messages."""

from __future__ import annotations

import socket
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Protocol
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from . import __version__


class ErrorLevel(str, Enum):
    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"


class SentryMessage(BaseModel):
    format: str
    params: list[Any] = Field(default_factory=list)

    def render(self) -> str:
        if not self.params:
            return self.format
        try:
            return self.format % tuple(self.params)
        except (TypeError, ValueError):
            return self.format

    def __str__(self) -> str:
        return self.render()


class StackFrame(BaseModel):
    filename: str
    function: str
    lineno: int | None = None
    module: str | None = None
    context_line: str | None = None
    in_app: bool = True


class Stacktrace(BaseModel):
    frames: list[StackFrame]


class ExceptionValue(BaseModel):
    type: str
    value: str
    module: str | None = None
    stacktrace: Stacktrace | None = None


class ExceptionInterface(BaseModel):
    values: list[ExceptionValue]


class SdkInfo(BaseModel):
    name: str = "ravenpost"
    version: str = __version__


class JsonPacket(BaseModel):
    model_config = ConfigDict(extra="allow")

    event_id: str = Field(default_factory=lambda: uuid4().hex)
    project: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    level: ErrorLevel = ErrorLevel.ERROR
    platform: str = "python"
    logger: str | None = None
    message: str | None = None
    logentry: SentryMessage | None = None
    culprit: str | None = None
    server_name: str | None = None
    release: str | None = None
    environment: str | None = None
    tags: dict[str, str] = Field(default_factory=dict)
    fingerprint: list[str] | None = None
    extra: dict[str, Any] = Field(default_factory=dict)
    exception: ExceptionInterface | None = None
    sdk: SdkInfo = Field(default_factory=SdkInfo)

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return value.astimezone(timezone.utc).replace(tzinfo=None).isoformat()

    def to_json(self) -> str:
        """Compact JSON payload, unset fields omitted."""
        return self.model_dump_json(exclude_none=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


def _frames(tb) -> list[StackFrame]:
    frames = []
    for summary in traceback.extract_tb(tb):
        frames.append(
            StackFrame(
                filename=summary.filename,
                function=summary.name,
                lineno=summary.lineno,
                context_line=summary.line or None,
                in_app="site-packages" not in summary.filename,
            )
        )
    return frames


def _exception_chain(exception: BaseException) -> list[BaseException]:
    """Exception and its causes, oldest first."""
    chain = []
    seen = set()
    current: BaseException | None = exception
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        chain.append(current)
        current = current.__cause__ or (None if current.__suppress_context__ else current.__context__)
    chain.reverse()
    return chain


def exception_interface(exception: BaseException) -> ExceptionInterface:
    values = []
    for exc in _exception_chain(exception):
        frames = _frames(exc.__traceback__)
        values.append(
            ExceptionValue(
                type=type(exc).__name__,
                value=str(exc),
                module=type(exc).__module__,
                stacktrace=Stacktrace(frames=frames) if frames else None,
            )
        )
    return ExceptionInterface(values=values)


def _culprit(interface: ExceptionInterface) -> str | None:
    last = interface.values[-1]
    if last.stacktrace is None:
        return None
    frame = last.stacktrace.frames[-1]
    return f"{frame.filename} in {frame.function}"


class PacketFactory(Protocol):
    def create(
        self,
        project_id: str,
        source: BaseException | SentryMessage | str,
        level: ErrorLevel,
        tags: dict[str, str] | None = None,
        fingerprint: list[str] | None = None,
        extra: dict[str, Any] | None = None,
        message: SentryMessage | str | None = None,
    ) -> JsonPacket: ...


class JsonPacketFactory:
    """Builds a JsonPacket from an exception or a message."""

    def __init__(self, server_name: str | None = None):
        self.server_name = server_name or socket.gethostname()

    def create(
        self,
        project_id: str,
        source: BaseException | SentryMessage | str,
        level: ErrorLevel,
        tags: dict[str, str] | None = None,
        fingerprint: list[str] | None = None,
        extra: dict[str, Any] | None = None,
        message: SentryMessage | str | None = None,
    ) -> JsonPacket:
        if isinstance(source, BaseException):
            interface = exception_interface(source)
            logentry = _as_message(message) if message is not None else None
            return JsonPacket(
                project=project_id,
                level=level,
                message=logentry.render() if logentry else str(source) or type(source).__name__,
                logentry=logentry,
                culprit=_culprit(interface),
                server_name=self.server_name,
                tags=dict(tags or {}),
                fingerprint=list(fingerprint) if fingerprint else None,
                extra=dict(extra or {}),
                exception=interface,
            )

        logentry = _as_message(source)
        return JsonPacket(
            project=project_id,
            level=level,
            message=logentry.render(),
            logentry=logentry,
            server_name=self.server_name,
            tags=dict(tags or {}),
            fingerprint=list(fingerprint) if fingerprint else None,
            extra=dict(extra or {}),
        )


def _as_message(value: SentryMessage | str) -> SentryMessage:
    if isinstance(value, SentryMessage):
        return value
    return SentryMessage(format=str(value))
