"""Stateless evaluation through the Magma online calculator."""

from __future__ import annotations

from typing import Any, Protocol
from urllib import error as urllib_error
from urllib import parse as urllib_parse
from urllib import request as urllib_request
from xml.parsers.expat import ExpatError

import xmltodict
from loguru import logger

from babel_magma.config import Settings
from babel_magma.errors import MalformedResponseError, RemoteTransportError
from babel_magma.literal import parse_literal
from babel_magma.types import ResultType

USER_AGENT = "babel-magma/0.1"
_HEADER_SEPARATORS = ("\r\n\r\n", "\n\n")


class HttpGetter(Protocol):
    def get(self, url: str) -> str: ...


class HttpTransport:
    """Blocking GET returning the raw payload: header block, blank line, body."""

    def __init__(self, *, timeout: float | None = None) -> None:
        self._timeout = timeout

    def get(self, url: str) -> str:
        request = urllib_request.Request(  # noqa: S310 - endpoint comes from settings.
            url,
            headers={
                "User-Agent": USER_AGENT,
                "Accept": "application/xml,text/xml;q=0.9,*/*;q=0.8",
            },
        )
        options: dict[str, Any] = {} if self._timeout is None else {"timeout": self._timeout}
        try:
            with urllib_request.urlopen(request, **options) as response:  # noqa: S310
                body_bytes = response.read()
                charset = response.headers.get_content_charset() or "utf-8"
                status_line = f"HTTP/1.1 {response.status} {response.reason}"
                header_lines = [f"{name}: {value}" for name, value in response.headers.items()]
        except urllib_error.HTTPError as exc:
            raise RemoteTransportError(f"http {exc.code}: {exc.reason}") from exc
        except urllib_error.URLError as exc:
            raise RemoteTransportError(f"{exc.reason!s}") from exc
        except OSError as exc:
            raise RemoteTransportError(f"{exc!s}") from exc

        header_block = "\n".join([status_line, *header_lines])
        return f"{header_block}\n\n{body_bytes.decode(charset, errors='replace')}"


def build_url(endpoint: str, source: str) -> str:
    return f"{endpoint}?{urllib_parse.urlencode({'input': source})}"


def split_payload(payload: str) -> str:
    """Drop the header block, everything up to the first blank line."""

    positions = [
        (index, separator)
        for separator in _HEADER_SEPARATORS
        if (index := payload.find(separator)) != -1
    ]
    if not positions:
        raise MalformedResponseError("response has no header/body boundary")
    index, separator = min(positions)
    return payload[index + len(separator) :]


def parse_results(xml: str) -> str:
    """Join the text of every ``<line>`` under ``<results>`` with newlines."""

    try:
        document = xmltodict.parse(xml, force_list=("line",), strip_whitespace=False)
    except ExpatError as exc:
        raise MalformedResponseError(f"invalid XML: {exc}") from exc

    results = _find_results(document)
    if results is None or (isinstance(results, str) and not results.strip()):
        return ""
    if not isinstance(results, dict):
        raise MalformedResponseError("<results> holds text instead of <line> elements")
    return "\n".join(_line_text(line) for line in results.get("line", []))


def _find_results(document: dict[str, Any]) -> Any:
    if "results" in document:
        return document["results"]
    root = next(iter(document.values()), None)
    if isinstance(root, dict) and "results" in root:
        return root["results"]
    raise MalformedResponseError("response has no <results> element")


def _line_text(line: Any) -> str:
    if line is None:
        return ""
    if isinstance(line, dict):
        return str(line.get("#text") or "")
    return str(line)


class RemoteExecutor:
    """Evaluate source text with one GET request; no state survives the call."""

    def __init__(self, settings: Settings, *, transport: HttpGetter | None = None) -> None:
        self._settings = settings
        self._transport = transport or HttpTransport(timeout=settings.remote_timeout)

    def execute(self, expanded: str, result_type: ResultType) -> Any:
        url = build_url(self._settings.remote_endpoint, expanded)
        logger.info("remote.request endpoint={} chars={}", self._settings.remote_endpoint, len(expanded))
        payload = self._transport.get(url)
        text = parse_results(split_payload(payload))
        if result_type == "value":
            return parse_literal(text)
        return text
