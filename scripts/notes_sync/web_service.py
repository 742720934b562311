"""Generic JSON-over-HTTP request helper.

``WebService.send_request`` never raises. Every outcome comes back as a
``RequestResult`` so callers can either read ``result.value`` (``None`` on any
failure) or inspect ``result.error`` to find out what went wrong.
"""

from __future__ import annotations

import http.client
import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import asdict, dataclass, is_dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Sequence, TypeVar

from .errors import (
    BadStatus,
    BadURL,
    DecodeError,
    DecodeErrorKind,
    NotesError,
    TransportError,
)
from .notes import Note, note_to_map

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0
PREVIEW_LENGTH = 500

T = TypeVar("T")
Decoder = Callable[[Any], T]
Opener = Callable[..., Any]


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(slots=True)
class RequestResult:
    value: Any = None
    error: NotesError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _validate_url(url: str) -> str:
    candidate = url.strip() if isinstance(url, str) else ""
    if not candidate:
        raise BadURL(str(url))
    try:
        parts = urllib.parse.urlsplit(candidate)
        parts.port  # non-numeric or out-of-range ports raise ValueError here
    except ValueError as exc:
        raise BadURL(candidate) from exc
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise BadURL(candidate)
    return candidate


def _json_ready(value: Any) -> Any:
    if isinstance(value, Note):
        return note_to_map(value)
    if hasattr(value, "to_map"):
        return value.to_map()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, Mapping):
        return {str(key): _json_ready(item) for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_json_ready(item) for item in value]
    return value


def encode_body(body: Any) -> bytes:
    try:
        return json.dumps(_json_ready(body), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise DecodeError(DecodeErrorKind.CORRUPTED, f"request body is not JSON serialisable: {exc}") from exc


def decode_body(data: bytes) -> Any:
    if not data:
        raise DecodeError(DecodeErrorKind.CORRUPTED, "response body is empty")
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(DecodeErrorKind.CORRUPTED, f"response is not valid UTF-8: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(DecodeErrorKind.CORRUPTED, f"response is not valid JSON: {exc}") from exc


class WebService:
    """Send JSON requests with a fixed timeout and classify every failure."""

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT, opener: Opener | None = None) -> None:
        self.timeout = timeout
        self._opener = opener or urllib.request.urlopen

    def send_request(
        self,
        url: str,
        method: HTTPMethod | str = HTTPMethod.GET,
        body: Any = None,
        decoder: Decoder[T] | None = None,
    ) -> RequestResult:
        method = HTTPMethod(method)
        LOGGER.debug("Starting %s request to %s", method.value, url)
        try:
            value = self._perform(url, method, body, decoder)
        except DecodeError as exc:
            LOGGER.warning("Decoding error (%s) for %s: %s", exc.kind.value, url, exc.detail)
            return RequestResult(error=exc)
        except NotesError as exc:
            LOGGER.warning("%s %s failed: %s", method.value, url, exc)
            return RequestResult(error=exc)
        LOGGER.debug("Successfully decoded response from %s", url)
        return RequestResult(value=value)

    def _perform(
        self,
        url: str,
        method: HTTPMethod,
        body: Any,
        decoder: Decoder[T] | None,
    ) -> Any:
        target = _validate_url(url)
        headers = {"Accept": "application/json"}
        data: bytes | None = None
        if body is not None:
            data = encode_body(body)
            headers["Content-Type"] = "application/json"
        request = urllib.request.Request(target, data=data, headers=headers, method=method.value)

        started = time.monotonic()
        try:
            with self._opener(request, timeout=self.timeout) as response:
                status = getattr(response, "status", None) or response.getcode()
                payload = response.read()
        except urllib.error.HTTPError as exc:
            raise BadStatus(exc.code, str(exc.reason or "")) from exc
        except urllib.error.URLError as exc:
            raise TransportError(f"{method.value} {target} failed: {exc.reason}") from exc
        except (TimeoutError, OSError, http.client.HTTPException) as exc:
            raise TransportError(f"{method.value} {target} failed: {exc}") from exc

        LOGGER.debug(
            "Got status %s from %s after %.1f seconds",
            status,
            target,
            time.monotonic() - started,
        )
        if not 200 <= int(status) < 300:
            raise BadStatus(int(status))
        LOGGER.debug("Raw data preview: %s", payload[:PREVIEW_LENGTH].decode("utf-8", errors="replace"))

        parsed = decode_body(payload)
        if decoder is None:
            return parsed
        try:
            return decoder(parsed)
        except DecodeError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(DecodeErrorKind.CORRUPTED, str(exc)) from exc


__all__ = [
    "DEFAULT_TIMEOUT",
    "HTTPMethod",
    "RequestResult",
    "WebService",
    "decode_body",
    "encode_body",
]
