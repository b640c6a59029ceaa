import gzip
import json

import httpx


class RecordingEndpoint:
    """httpx.MockTransport handler that records requests and answers with a fixed reply.

    With no body configured it echoes the packet's event_id back, like a real store endpoint.
    """

    def __init__(self, body: str | None = None, status_code: int = 200):
        self.body = body
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is None:
            event = decode_request(request)
            return httpx.Response(self.status_code, json={"id": event["event_id"]})
        return httpx.Response(self.status_code, text=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def request_bytes(request: httpx.Request) -> bytes:
    if request.headers.get("content-encoding") == "gzip":
        return gzip.decompress(request.content)
    return request.content


def decode_request(request: httpx.Request) -> dict:
    return json.loads(request_bytes(request))
