"""Results of remote operations.

Every operation returns exactly one outcome. Failures are values, never raised, so
callers can branch on the outcome type or on its `code`.
"""
import xml.etree.ElementTree as ET
from typing import Annotated, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

SABRE_NAMESPACE = "http://sabredav.org/ns"

_STATUS_KINDS = {
    401: "unauthorized",
    403: "forbidden",
    404: "file_not_found",
    409: "conflict",
    412: "precondition_failed",
    423: "locked",
    507: "quota_exceeded",
}


class BaseOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str

    @property
    def success(self) -> bool:
        return False

    @property
    def log_message(self) -> str:
        return self.code


class Success(BaseOutcome):
    """The operation did what was asked."""
    code: Literal["ok"] = "ok"

    @property
    def success(self) -> bool:
        return True

    @property
    def log_message(self) -> str:
        return "Operation finished with success"


class NoOp(Success):
    """Nothing had to be done, e.g. renaming an entry to its current name."""
    code: Literal["no_op"] = "no_op"  # type: ignore[assignment]

    @property
    def log_message(self) -> str:
        return "Nothing to do"


class InvalidCharacter(BaseOutcome):
    """The destination contains characters the server does not accept. Detected locally."""
    code: Literal["invalid_character_in_name"] = "invalid_character_in_name"
    path: str

    @property
    def log_message(self) -> str:
        return f"Invalid character in name: {self.path}"


class DestinationConflict(BaseOutcome):
    """Something already exists at the destination. Detected before moving."""
    code: Literal["invalid_overwrite"] = "invalid_overwrite"
    path: str

    @property
    def log_message(self) -> str:
        return f"Destination already exists: {self.path}"


class TransportFailure(BaseOutcome):
    """The request never produced an HTTP response (DNS, connection, timeout, bad URL...)."""
    code: Literal["transport_failure"] = "transport_failure"
    kind: str
    details: str

    @classmethod
    def from_exception(cls, exc: Exception) -> "TransportFailure":
        if isinstance(exc, httpx.TimeoutException):
            kind = "timeout"
        elif isinstance(exc, httpx.ConnectError):
            kind = "wrong_connection"
        elif isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
            kind = "incorrect_address"
        elif isinstance(exc, (httpx.TransportError, OSError)):
            kind = "network_error"
        else:
            kind = "unknown_error"
        return cls(kind=kind, details=f"{type(exc).__name__}: {exc}")

    @property
    def log_message(self) -> str:
        return f"Transport failure ({self.kind}): {self.details}"


class ProtocolFailure(BaseOutcome):
    """The server answered with a status the operation does not accept."""
    code: Literal["protocol_failure"] = "protocol_failure"
    status_code: int
    reason: str = ""
    message: str | None = None
    """Error message from the server's response body, when it sent one."""

    @property
    def kind(self) -> str:
        if self.status_code in _STATUS_KINDS:
            return _STATUS_KINDS[self.status_code]
        if self.status_code >= 500:
            return "server_error"
        return "unhandled_http_code"

    @classmethod
    def from_response(cls, response: httpx.Response, body: bytes = b"") -> "ProtocolFailure":
        return cls(
            status_code=response.status_code,
            reason=response.reason_phrase,
            message=parse_error_message(body),
        )

    @property
    def log_message(self) -> str:
        status_line = f"HTTP {self.status_code} {self.reason}".rstrip()
        if self.message:
            return f"{status_line}: {self.message}"
        return status_line


def parse_error_message(body: bytes) -> str | None:
    """Extract the <s:message> of a sabre/dav error document."""
    if not body:
        return None
    try:
        root = ET.fromstring(body)
    except ET.ParseError:
        return None
    message = root.find(f"{{{SABRE_NAMESPACE}}}message")
    if message is None or not message.text:
        return None
    return message.text.strip()


OperationOutcome = Annotated[
    Success | NoOp | InvalidCharacter | DestinationConflict | TransportFailure | ProtocolFailure,
    Field(discriminator="code"),
]
outcome_adapter = TypeAdapter(OperationOutcome)
