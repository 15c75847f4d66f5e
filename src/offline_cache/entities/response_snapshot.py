"""Immutable response snapshot domain entity."""

import base64
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

TEXT_CONTENT_TYPE = "text/plain;charset=UTF-8"
JSON_CONTENT_TYPE = "application/json"


class ResponseType(str, Enum):
    """Classification of a response, mirroring the fetch API response types."""

    BASIC = "basic"  # same-origin
    CORS = "cors"  # cross-origin, readable
    OPAQUE = "opaque"  # cross-origin, unreadable
    ERROR = "error"
    DEFAULT = "default"  # constructed locally


@dataclass(frozen=True)
class ResponseSnapshot:
    """A fully-read, immutable copy of an HTTP response.

    Response bodies are read once into ``body``; the same snapshot can then be
    returned to the caller and written to the cache store without duplication.

    Attributes:
        status: HTTP status code
        headers: Response headers as (name, value) pairs
        body: Response body bytes
        url: Final URL the response was served from
        response_type: Origin classification of the response
        redirected: Whether the response is the result of a redirect
    """

    status: int
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""
    url: str = ""
    response_type: ResponseType = ResponseType.BASIC
    redirected: bool = False

    @classmethod
    def text_response(cls, text: str, status: int = 200) -> "ResponseSnapshot":
        """Create a synthetic plain-text response."""
        return cls(
            status=status,
            headers=(("Content-Type", TEXT_CONTENT_TYPE),),
            body=text.encode("utf-8"),
            response_type=ResponseType.DEFAULT,
        )

    @classmethod
    def json_response(cls, payload: Any, status: int = 200) -> "ResponseSnapshot":
        """Create a synthetic JSON response."""
        return cls(
            status=status,
            headers=(("Content-Type", JSON_CONTENT_TYPE),),
            body=json.dumps(payload, separators=(",", ":")).encode("utf-8"),
            response_type=ResponseType.DEFAULT,
        )

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    @property
    def content_type(self) -> str | None:
        return self.header("content-type")

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)

    @property
    def is_cacheable(self) -> bool:
        """Whether the snapshot may be stored by the asset strategy.

        Only 200 responses that are same-origin, non-redirected and readable
        qualify; error pages and opaque cross-origin blobs never do.
        """
        return (
            self.status == 200
            and self.response_type is ResponseType.BASIC
            and not self.redirected
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict (body is base64 encoded)."""
        return {
            "status": self.status,
            "headers": [list(pair) for pair in self.headers],
            "body": base64.b64encode(self.body).decode("ascii"),
            "url": self.url,
            "response_type": self.response_type.value,
            "redirected": self.redirected,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResponseSnapshot":
        """Inverse of :meth:`to_dict`.

        Raises:
            KeyError, ValueError: If ``data`` is not a serialized snapshot
        """
        return cls(
            status=int(data["status"]),
            headers=tuple((str(name), str(value)) for name, value in data.get("headers", [])),
            body=base64.b64decode(data.get("body", "")),
            url=data.get("url", ""),
            response_type=ResponseType(data.get("response_type", ResponseType.BASIC.value)),
            redirected=bool(data.get("redirected", False)),
        )
