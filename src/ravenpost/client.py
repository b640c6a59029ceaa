"""RavenClient: captures exceptions and messages and sends them to Sentry."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

import httpx
from pydantic_core import PydanticSerializationError

from .auth import AUTH_HEADER, USER_AGENT, create_auth_header
from .config import Settings
from .content import CompressedContent, StringContent
from .dsn import Dsn
from .errors import FaultKind, ProtocolError, SendFault, SendResult
from .packet import ErrorLevel, JsonPacket, JsonPacketFactory, PacketFactory, SentryMessage
from .response import decode_event_id
from .scrubber import LogScrubber

logger = logging.getLogger(__name__)

FaultHandler = Callable[[SendFault], None]
BeforeSend = Callable[[JsonPacket], JsonPacket]


def log_fault(fault: SendFault) -> None:
    logger.warning(f"Failed to send event ({fault.kind.value}): {fault.message}")


class RavenClient:
    def __init__(
        self,
        dsn: Dsn | str,
        *,
        packet_factory: PacketFactory | None = None,
        scrubber: LogScrubber | None = None,
        compression: bool = True,
        timeout: float = 5.0,
        fault_handler: FaultHandler = log_fault,
        before_send: BeforeSend | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        logger_name: str = "root",
        release: str | None = None,
        environment: str | None = None,
        tags: dict[str, str] | None = None,
    ):
        if dsn is None:
            raise ValueError("dsn must not be None")
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.dsn = Dsn.parse(dsn) if isinstance(dsn, str) else dsn
        self.packet_factory = packet_factory or JsonPacketFactory()
        self.scrubber = scrubber
        self.compression = compression
        self.timeout = timeout
        self.fault_handler = fault_handler
        self.before_send = before_send
        self.transport = transport
        self.logger_name = logger_name
        self.release = release
        self.environment = environment
        self.tags = dict(tags or {})

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "RavenClient":
        return cls(
            settings.dsn,
            compression=settings.compression,
            timeout=settings.timeout,
            logger_name=settings.logger_name,
            release=settings.release,
            environment=settings.environment,
            **kwargs,
        )

    async def capture_exception(
        self,
        exception: BaseException,
        message: SentryMessage | str | None = None,
        level: ErrorLevel = ErrorLevel.ERROR,
        tags: dict[str, str] | None = None,
        fingerprint: list[str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> str | None:
        """Capture an exception. Returns the event id, or None if it could not be sent."""
        packet = self.packet_factory.create(
            self.dsn.project_id, exception, level, tags, fingerprint, extra, message=message
        )
        return await self.send(packet, self.dsn)

    async def capture_message(
        self,
        message: SentryMessage | str,
        level: ErrorLevel = ErrorLevel.INFO,
        tags: dict[str, str] | None = None,
        fingerprint: list[str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> str | None:
        """Capture a message. Returns the event id, or None if it could not be sent."""
        packet = self.packet_factory.create(self.dsn.project_id, message, level, tags, fingerprint, extra)
        return await self.send(packet, self.dsn)

    def prepare_packet(self, packet: JsonPacket) -> JsonPacket:
        """Fill in client-level metadata. Override to customize outgoing packets."""
        if not packet.logger or packet.logger == "root":
            packet.logger = self.logger_name
        packet.release = packet.release or self.release
        packet.environment = packet.environment or self.environment
        packet.tags = {**self.tags, **packet.tags}
        if self.before_send is not None:
            packet = self.before_send(packet)
        return packet

    async def send(self, packet: JsonPacket, dsn: Dsn) -> str | None:
        """Send one packet. Never raises for delivery faults; returns the event id or None."""
        if dsn is None:
            raise ValueError("dsn must not be None")

        try:
            result = await asyncio.wait_for(self._transmit(packet, dsn), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            result = SendResult.failed(FaultKind.TIMEOUT, e)
        except Exception as e:
            result = SendResult.failed(FaultKind.UNEXPECTED, e)

        match result:
            case SendResult(event_id=str() as event_id):
                return event_id
            case SendResult(fault=SendFault() as fault):
                self._handle_fault(fault)
                return None
            case _:
                logger.debug("Store endpoint returned an empty body")
                return None

    def _handle_fault(self, fault: SendFault) -> None:
        try:
            self.fault_handler(fault)
        except Exception:
            logger.exception("Fault handler raised")

    async def _transmit(self, packet: JsonPacket, dsn: Dsn) -> SendResult:
        try:
            packet = self.prepare_packet(packet)
        except Exception as e:
            return SendResult.failed(FaultKind.PREPARATION, e)

        content: StringContent | CompressedContent
        try:
            data = packet.to_json()
            if self.scrubber is not None:
                data = self.scrubber.scrub(data)
            content = StringContent(data, media_type="application/json")
        except (PydanticSerializationError, TypeError, ValueError) as e:
            # UnicodeEncodeError (lone surrogates) is a ValueError
            return SendResult.failed(FaultKind.SERIALIZATION, e)

        try:
            if self.compression:
                content = CompressedContent(content, "gzip")
            event_id = await self._post(content, dsn)
        except httpx.TimeoutException as e:
            return SendResult.failed(FaultKind.TIMEOUT, e)
        except httpx.HTTPStatusError as e:
            return SendResult.failed(FaultKind.HTTP_STATUS, e)
        except (httpx.HTTPError, OSError) as e:
            return SendResult.failed(FaultKind.TRANSPORT, e)
        except ProtocolError as e:
            return SendResult.failed(FaultKind.PROTOCOL, e)
        finally:
            await content.aclose()

        return SendResult(event_id=event_id)

    async def _post(self, content: StringContent | CompressedContent, dsn: Dsn) -> str | None:
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
            AUTH_HEADER: create_auth_header(dsn),
            **content.headers,
        }
        length = content.content_length
        body = content if length is None else content.read()

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            logger.debug(f"Sending event to {dsn.store_uri}")
            response = await client.post(dsn.store_uri, content=body, headers=headers)
            response.raise_for_status()
            return decode_event_id(response.text)
