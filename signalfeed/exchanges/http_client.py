from __future__ import annotations

import http.client
import json
import time
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from signalfeed.config.settings import settings
from signalfeed.errors import ProviderMalformedResponse, ProviderTimeout, ProviderUnavailable

_CHUNK_SIZE = 65536


def _read_body(response, provider: str, timeout_seconds: float, deadline: float) -> bytes:
    # The socket timeout bounds each recv only; a slow drip must not outlive the attempt.
    chunks: list[bytes] = []
    while True:
        if time.monotonic() > deadline:
            raise ProviderTimeout(provider, f"response not complete after {timeout_seconds}s")
        chunk = response.read(_CHUNK_SIZE)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


def get_json(provider: str, url: str, params: dict[str, Any], timeout_seconds: float) -> Any:
    """GET a JSON document, translating every transport failure into a ProviderError.

    The whole attempt, connect included, is bounded by `timeout_seconds`. The
    connection is closed when it expires, so the next provider in the cascade
    starts on a fresh socket.
    """
    query = urlencode(params)
    target = f"{url}?{query}" if query else url
    request = Request(
        target,
        headers={"User-Agent": f"signal-feed-gateway/{settings.app_version}", "Accept": "application/json"},
    )
    deadline = time.monotonic() + timeout_seconds
    try:
        with urlopen(request, timeout=timeout_seconds) as response:
            body = _read_body(response, provider, timeout_seconds, deadline)
    except HTTPError as exc:
        raise ProviderUnavailable(provider, f"HTTP {exc.code} from {url}") from exc
    except URLError as exc:
        if isinstance(exc.reason, TimeoutError):
            raise ProviderTimeout(provider, f"timed out after {timeout_seconds}s") from exc
        raise ProviderUnavailable(provider, f"connection failed: {exc.reason}") from exc
    except TimeoutError as exc:
        raise ProviderTimeout(provider, f"timed out after {timeout_seconds}s") from exc
    except http.client.HTTPException as exc:
        # Truncated bodies, garbage status lines, oversized headers.
        raise ProviderUnavailable(provider, f"broken HTTP response: {exc!r}") from exc
    except OSError as exc:
        raise ProviderUnavailable(provider, f"connection failed: {exc}") from exc

    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise ProviderMalformedResponse(provider, "response is not valid JSON") from exc
