from __future__ import annotations

import json
from http.client import HTTPException
from typing import Any, Mapping, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .base import ProviderFetchError

DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_USER_AGENT = "skycast/0.1"


class JsonFetcher(Protocol):
    def __call__(
        self,
        url: str,
        *,
        request_name: str,
        headers: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> dict[str, Any]:
        """Return the decoded JSON object found at ``url``."""


def fetch_json(
    url: str,
    *,
    request_name: str,
    headers: Mapping[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    request_headers = {"User-Agent": DEFAULT_USER_AGENT, "Accept": "application/json"}
    if headers:
        request_headers.update(headers)
    request = Request(url, headers=request_headers)
    try:
        with urlopen(request, timeout=timeout) as response:
            payload = json.loads(response.read().decode("utf-8"))
    except HTTPError as exc:
        raise ProviderFetchError(request_name, f"HTTP error {exc.code}", status=exc.code) from exc
    except (URLError, HTTPException, OSError) as exc:
        raise ProviderFetchError(request_name, "network failure") from exc
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProviderFetchError(request_name, "response was not valid JSON") from exc

    if not isinstance(payload, dict):
        raise ProviderFetchError(request_name, "unexpected response shape")
    return payload
