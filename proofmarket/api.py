"""Subscription to the market server's stream of proof requests."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from urllib.parse import urljoin, urlsplit

import requests

from .config import ApiConfig
from .errors import PrimitivesError, RequestParsingError, ServerSubscriptionError
from .request import Request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SseEvent:
    """One dispatched server-sent event."""

    data: str
    event: str = "message"
    id: str | None = None


def iter_sse_events(lines: Iterable[str | bytes]) -> Iterator[SseEvent]:
    """Parse server-sent event lines into dispatched events."""
    data_lines: list[str] = []
    event_type = ""
    last_id: str | None = None
    for raw in lines:
        line = raw.decode("utf-8", "replace") if isinstance(raw, bytes) else raw
        line = line.rstrip("\r")
        if not line:
            if data_lines:
                yield SseEvent(
                    data="\n".join(data_lines), event=event_type or "message", id=last_id
                )
            data_lines = []
            event_type = ""
            continue
        if line.startswith(":"):
            continue
        name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]
        if name == "data":
            data_lines.append(value)
        elif name == "event":
            event_type = value
        elif name == "id" and "\0" not in value:
            last_id = value


def parse_event_data(data: str) -> Request:
    """Decode a proof request from an event's data payload."""
    try:
        return Request.from_json(data)
    except (PrimitivesError, ValueError, TypeError, AttributeError) as exc:
        raise RequestParsingError(
            f"Failed to parse proof request from incoming event: {exc}"
        ) from exc


def _event_source_error(detail: object) -> RequestParsingError:
    return RequestParsingError(f"EventSource encountered an error: {detail}")


class ProviderApi:
    """Client for the market server's provider endpoints."""

    def __init__(self, config: ApiConfig, session: requests.Session | None = None) -> None:
        self.server_url = config.server_url
        self._timeout = config.request_timeout
        self._session = session or requests.Session()

    def _subscribe_url(self) -> str:
        parts = urlsplit(self.server_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ServerSubscriptionError(f"invalid server url: {self.server_url}")
        return urljoin(self.server_url, "/subscribe")

    def subscribe_to_markets(self) -> Iterator[Request | RequestParsingError]:
        """Stream incoming requests; failures arrive as RequestParsingError items.

        The connection is opened when iteration starts.
        """
        return self._stream(self._subscribe_url())

    def _stream(self, url: str) -> Iterator[Request | RequestParsingError]:
        try:
            response = self._session.get(
                url,
                stream=True,
                headers={"Accept": "text/event-stream"},
                timeout=(self._timeout, None),
            )
        except requests.RequestException as exc:
            yield _event_source_error(exc)
            return
        with response:
            if not response.ok:
                yield _event_source_error(f"invalid status code: {response.status_code}")
                return
            logger.debug("Connected to /subscribe endpoint")
            response.encoding = "utf-8"
            try:
                for event in iter_sse_events(response.iter_lines(decode_unicode=True)):
                    try:
                        yield parse_event_data(event.data)
                    except RequestParsingError as exc:
                        yield exc
            except requests.RequestException as exc:
                yield _event_source_error(exc)