"""HTTP access to the shipping API: authentication, bodies and error handling."""

from __future__ import annotations

import json
import platform
from datetime import datetime
from typing import Any
from urllib.parse import quote, urlencode, urljoin

import requests

from .errors import parse_api_error
from .models import Model

CLIENT_VERSION = "2.0.0"
DEFAULT_BASE_URL = "https://api.easypost.com/v2/"
DEFAULT_TIMEOUT_MS = 60000
DEFAULT_USER_AGENT = (
    f"EasyPost/v2 PythonClient/{CLIENT_VERSION} Python/{platform.python_version()} "
    f"OS/{platform.system()} OSVersion/NA OSArch/{platform.machine()}"
)


class FormData(dict):
    """Fields sent url-encoded instead of as JSON; values are strings or lists of strings."""

    def encode(self) -> str:
        """The form body, with keys in sorted order."""
        pairs: list[tuple[str, str]] = []
        for key in sorted(self):
            value = self[key]
            values = [value] if isinstance(value, str) else list(value)
            pairs.extend((key, item) for item in values)
        return urlencode(pairs)


def _to_json(value: Any) -> Any:
    if isinstance(value, Model):
        return value.to_dict()
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"cannot encode {type(value).__name__} as JSON")


class HTTPTransport:
    """Sends authenticated requests to the API and decodes the answers.

    ``timeout`` is in milliseconds; zero or less means the default of one
    minute.
    """

    def __init__(self, api_key, base_url=None, user_agent=None, timeout=None, session=None):
        self.api_key = api_key
        self.base_url = base_url or DEFAULT_BASE_URL
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.timeout = timeout if timeout is not None and timeout > 0 else DEFAULT_TIMEOUT_MS
        self.session = session if session is not None else requests.Session()

    def _send(self, method: str, path: str, body: Any) -> Any:
        if not self.api_key:
            raise ValueError("no API key provided")
        url = urljoin(self.base_url, quote(path))
        headers = {"User-Agent": self.user_agent}
        data = None
        if isinstance(body, FormData):
            data = body.encode().encode("ascii")
            headers["Content-Type"] = "application/x-www-form-urlencoded"
        elif body is not None:
            data = json.dumps(body, default=_to_json, separators=(",", ":")).encode("utf-8")
            headers["Content-Type"] = "application/json"
        response = self.session.request(
            method,
            url,
            data=data,
            headers=headers,
            auth=(self.api_key, ""),
            timeout=self.timeout / 1000,
        )
        if not 200 <= response.status_code <= 299:
            status = f"{response.status_code} {response.reason or ''}".rstrip()
            raise parse_api_error(response.status_code, status, response.content)
        return response

    def request(self, method, path, body=None):
        """Send a request and return the decoded JSON answer.

        Raises APIError for HTTP error statuses and ValueError when no API
        key is set or the answer is not JSON.
        """
        response = self._send(method, path, body)
        return json.loads(response.content)

    def get(self, path):
        """GET ``path`` and return the decoded answer."""
        return self.request("GET", path)

    def post(self, path, body=None):
        """POST ``body`` to ``path`` and return the decoded answer."""
        return self.request("POST", path, body)

    def patch(self, path, body=None):
        """PATCH ``path`` with ``body`` and return the decoded answer."""
        return self.request("PATCH", path, body)

    def delete(self, path):
        """DELETE ``path``; the answer's body is ignored."""
        self._send("DELETE", path, None)