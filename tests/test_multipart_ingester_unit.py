import asyncio
import os
from pathlib import Path

import pytest
from starlette.requests import Request

from exceptions import ValidationError
from infrastructure.multipart_ingester import MultipartIngester

BOUNDARY = "sessionboundary"


def _body(audio: bytes) -> bytes:
    return (
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="players"\r\n\r\n'
        '["Mira"]\r\n'
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="audio"; filename="voice.mp3"\r\n'
        "Content-Type: audio/mpeg\r\n\r\n"
    ).encode() + audio + f"\r\n--{BOUNDARY}--\r\n".encode()


def _chunked_request(body: bytes, chunk_size: int = 64 * 1024) -> tuple[Request, list]:
    """Builds a request whose body arrives in pieces without a Content-Length."""
    chunks = [body[i : i + chunk_size] for i in range(0, len(body), chunk_size)]
    delivered: list[int] = []

    async def receive():
        if not chunks:
            return {"type": "http.disconnect"}
        chunk = chunks.pop(0)
        delivered.append(len(chunk))
        return {"type": "http.request", "body": chunk, "more_body": bool(chunks)}

    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/session-summary",
        "headers": [
            (b"content-type", f"multipart/form-data; boundary={BOUNDARY}".encode()),
            (b"transfer-encoding", b"chunked"),
        ],
    }
    return Request(scope, receive), delivered


def test_chunked_body_without_content_length_is_ingested(tmp_path: Path) -> None:
    request, _ = _chunked_request(_body(b"ID3 audio"), chunk_size=16)
    ingester = MultipartIngester(max_file_size=1024, temp_dir=tmp_path)

    form = asyncio.run(ingester.ingest(request))

    assert form.get_all("players") == ['["Mira"]']
    audio = form.take_file("audio")
    assert audio.path.read_bytes() == b"ID3 audio"
    assert audio.content_type == "audio/mpeg"
    os.remove(audio.path)


def test_chunked_body_stops_once_past_the_limit(tmp_path: Path) -> None:
    body = _body(b"x" * (4 * 1024 * 1024))
    request, delivered = _chunked_request(body)
    ingester = MultipartIngester(max_file_size=8, temp_dir=tmp_path)

    with pytest.raises(ValidationError, match="maximum size of 8 bytes"):
        asyncio.run(ingester.ingest(request))

    assert sum(delivered) < len(body)
    assert sum(delivered) <= 8 + 1024 * 1024 + 64 * 1024
    assert os.listdir(tmp_path) == []


def test_invalid_content_length_is_rejected(tmp_path: Path) -> None:
    request, delivered = _chunked_request(_body(b"ID3"))
    request.scope["headers"].append((b"content-length", b"lots"))
    ingester = MultipartIngester(max_file_size=1024, temp_dir=tmp_path)

    with pytest.raises(ValidationError, match="Invalid Content-Length"):
        asyncio.run(ingester.ingest(request))

    assert delivered == []
