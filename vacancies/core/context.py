"""
Request-scoped context passed explicitly into services.

Carries the correlation id assigned by the request-id middleware (and the
authenticated principal, when authorization is enabled) so that service log
lines can be tied back to a single HTTP request.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, MutableMapping, Optional

REQUEST_ID_HEADER = "X-Request-ID"


def new_request_id() -> str:
    return uuid.uuid4().hex


class RequestLogger(logging.LoggerAdapter):
    """Logger adapter that prefixes every message with the request id."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['request_id']}] {msg}", kwargs


@dataclass(frozen=True)
class RequestContext:
    """Per-request state; never shared between requests."""

    request_id: str = field(default_factory=new_request_id)
    principal: Optional[str] = None

    def logger(self, logger: logging.Logger) -> RequestLogger:
        return RequestLogger(logger, {"request_id": self.request_id})
