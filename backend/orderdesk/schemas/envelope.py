"""
Order Desk Backend - Response Envelope Schemas
================================================

What:  The uniform `{status, message?, ...}` body every POST returns, plus the
       JSON shape of the /health probe.
How:   Handlers build an `Envelope`; the route serializes `to_content()` as
       application/json. Extra fields (user, orders, ...) sit at the top level
       next to `status`, which is what the client app reads.

Status taxonomy:
    success  - the action did what was asked
    warning  - accepted but had no effect (notification with zero recipients)
    error    - the action failed; `message` says why
"""

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field


class ResponseStatus(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Envelope(BaseModel):
    """
    Result of one action, ready for the wire.

    `data` holds the action-specific fields; they are merged into the top
    level of the JSON body rather than nested under a key.
    """

    status: ResponseStatus
    message: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def success(cls, message: Optional[str] = None, **data: Any) -> "Envelope":
        return make_envelope(ResponseStatus.SUCCESS, message=message, **data)

    @classmethod
    def warning(cls, message: str, **data: Any) -> "Envelope":
        return make_envelope(ResponseStatus.WARNING, message=message, **data)

    @classmethod
    def error(cls, message: str) -> "Envelope":
        return make_envelope(ResponseStatus.ERROR, message=message)

    @property
    def is_error(self) -> bool:
        return self.status is ResponseStatus.ERROR

    def to_content(self) -> Dict[str, Any]:
        """JSON-serializable body: status, then message (if any), then data fields."""
        content: Dict[str, Any] = {"status": self.status.value}
        if self.message is not None:
            content["message"] = self.message
        content.update(self.data)
        return content


def make_envelope(status: Union[ResponseStatus, str], **fields: Any) -> Envelope:
    """
    Build an envelope from a status and arbitrary caller fields.

    Every envelope is made here; Envelope.success / warning / error are
    shorthands for the three statuses. A `message` field becomes the envelope message; every other field is
    carried through to the top level of the body.
    """
    message = fields.pop("message", None)
    return Envelope(status=ResponseStatus(status), message=message, data=fields)


class HealthResponse(BaseModel):
    """
    What:  Result of GET /health.
    Who:   Load balancers and uptime monitors.
    """

    status: str = Field(description="healthy or degraded")
    version: str = Field(description="Backend version")
    sheet_backend: str = Field(description="Configured sheet store: google or json")
    notifications: str = Field(description="configured or missing_credentials")
    uptime_seconds: float = Field(description="Seconds since the process started")
