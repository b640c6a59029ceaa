"""Minimal Sentry-compatible store endpoint for local smoke tests."""

import json
import logging
import zlib
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request

from .auth import AUTH_HEADER

logger = logging.getLogger(__name__)

# wbits for zlib.decompressobj; 47 auto-detects gzip and zlib containers
DECODERS = {"gzip": 16 + zlib.MAX_WBITS, "deflate": 32 + zlib.MAX_WBITS}


def decode_body(body: bytes, encoding: str | None) -> bytes:
    if not encoding or encoding == "identity":
        return body
    wbits = DECODERS.get(encoding.lower())
    if wbits is None:
        raise HTTPException(status_code=415, detail=f"Unsupported Content-Encoding: {encoding}")
    try:
        decompressor = zlib.decompressobj(wbits)
        data = decompressor.decompress(body) + decompressor.flush()
    except zlib.error as e:
        raise HTTPException(status_code=400, detail=f"Corrupt {encoding} body: {e}")
    if not decompressor.eof:
        raise HTTPException(status_code=400, detail=f"Truncated {encoding} body")
    return data


def create_app() -> FastAPI:
    app = FastAPI(title="ravenpost dev server")
    app.state.events = []

    @app.post("/api/{project_id}/store/")
    async def handle_store(project_id: str, request: Request) -> dict:
        if not request.headers.get(AUTH_HEADER, "").startswith("Sentry "):
            raise HTTPException(status_code=401, detail=f"Missing {AUTH_HEADER} header")

        raw = await request.body()
        data = decode_body(raw, request.headers.get("content-encoding"))
        try:
            event = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise HTTPException(status_code=400, detail=f"Invalid JSON: {e}")
        if not isinstance(event, dict):
            raise HTTPException(status_code=400, detail="Event must be a JSON object")

        event_id = event.get("event_id") or uuid4().hex
        request.app.state.events.append({"project_id": project_id, "event": event})
        logger.info(f"Stored event {event_id} for project {project_id}")
        return {"id": event_id}

    @app.get("/events")
    async def handle_events(request: Request) -> list[dict]:
        return request.app.state.events

    return app


app = create_app()
