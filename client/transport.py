import logging
from typing import Any, List, Optional

import requests
from pydantic import ValidationError

from protocol.errors import ProtocolError, TransportError
from protocol.types import Message

log = logging.getLogger(__name__)


class HttpFeedStore:
    """
    Feed store reached over HTTP. Every request has a bounded timeout; no
    retries happen here, a failed call surfaces as TransportError.
    """

    def __init__(self, base_url: str, timeout: float = 10.0, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}/messages"

    def publish(self, message: Message) -> Message:
        body = self._request("POST", json=message.to_wire())
        if not isinstance(body, dict):
            raise ProtocolError("store did not echo the stored message")
        return self._parse(body)

    def latest(self, count: Optional[int] = None) -> List[Message]:
        params = {} if count is None else {"count": count}
        return self._parse_list(self._request("GET", params=params))

    def page(self, limit: int, next_id: Optional[int] = None) -> List[Message]:
        params = {"limit": limit}
        if next_id is not None:
            params["next"] = next_id
        return self._parse_list(self._request("GET", params=params))

    # ========== Internals ==========
    def _request(self, method: str, **kwargs) -> Any:
        log.debug("%s %s %s", method, self.messages_url, kwargs.get("params", ""))
        try:
            resp = self.session.request(method, self.messages_url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            raise TransportError(f"feed store did not answer within {self.timeout}s") from e
        except requests.RequestException as e:
            raise TransportError(f"cannot reach feed store at {self.base_url}: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise TransportError(
                f"feed store returned HTTP {resp.status_code} for {method} /messages",
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise ProtocolError("feed store response is not valid JSON") from e

    def _parse(self, obj: Any) -> Message:
        try:
            return Message.model_validate(obj)
        except ValidationError as e:
            raise ProtocolError(f"malformed message from feed store: {e.error_count()} invalid field(s)") from e

    def _parse_list(self, body: Any) -> List[Message]:
        if not isinstance(body, list):
            raise ProtocolError("feed store listing is not a JSON array")
        return [self._parse(obj) for obj in body]
