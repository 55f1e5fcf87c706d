"""Error types raised by the TikTok Shop adapter."""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Discriminant for ServiceError."""
    VALIDATION = "validation"
    TRANSPORT = "transport"
    REMOTE = "remote"
    PROXY = "proxy"
    DOCUMENT = "document"


class ServiceError(Exception):
    """
    Uniform error raised by every adapter operation.

    Callers branch on ``kind`` (and ``status`` for remote failures) instead of
    on a class hierarchy. ``service`` names the resource area that raised or
    re-tagged the error (e.g. ``"orders"``).
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.VALIDATION,
        status: Optional[int] = None,
        data: Any = None,
        stage: Optional[str] = None,
        service: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status = status
        self.data = data
        self.stage = stage
        self.service = service

    def with_service(self, service: str) -> "ServiceError":
        """Tag the error with a resource area, keeping status and data."""
        if self.service is None:
            self.service = service
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Host-facing error record."""
        record: Dict[str, Any] = {"message": self.message, "kind": self.kind.value}
        if self.status is not None:
            record["status"] = self.status
        if self.data is not None:
            record["data"] = self.data
        if self.stage is not None:
            record["stage"] = self.stage
        if self.service is not None:
            record["service"] = self.service
        return record

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, status={self.status!r}, "
            f"service={self.service!r}, message={self.message!r})"
        )


class ProxyConfigurationError(ServiceError):
    """Raised when a proxy string cannot be parsed."""

    def __init__(self, message: str):
        super().__init__(message, kind=ErrorKind.PROXY)


class DocumentError(ServiceError):
    """Raised by the PDF service, tagged with the failing processing stage."""

    STAGES = ("download", "validate", "resize", "output")

    def __init__(self, message: str, stage: str, status: Optional[int] = None):
        if stage not in self.STAGES:
            raise ValueError(f"Unknown document processing stage: {stage}")
        super().__init__(
            message,
            kind=ErrorKind.DOCUMENT,
            status=status,
            stage=stage,
            service="pdf",
        )


def wrap_error(error: BaseException, service: str) -> ServiceError:
    """
    Re-tag any exception as a ServiceError for the given resource area.

    ServiceErrors keep their kind, status and data. Anything else becomes a
    transport error carrying the original message.
    """
    if isinstance(error, ServiceError):
        return error.with_service(service)
    message = str(error) or f"{service} request failed with an unknown error."
    return ServiceError(message, kind=ErrorKind.TRANSPORT, service=service)
