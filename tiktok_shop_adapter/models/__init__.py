"""Data models for TikTok Shop requests and document processing."""

from .request_models import (
    Body,
    CanonicalSignatureInput,
    Credentials,
    EmptyBody,
    JsonBody,
    MultipartBody,
    ProxySpec,
    RawBody,
    RequestSpec,
    SignedRequest,
    body_from_value,
    serialize_json,
)
from .document_models import (
    PageSizeMm,
    PageSizePoints,
    PdfResizeMetadata,
    PdfResizeRequest,
    PdfResizeResult,
)

__all__ = [
    "Body",
    "CanonicalSignatureInput",
    "Credentials",
    "EmptyBody",
    "JsonBody",
    "MultipartBody",
    "ProxySpec",
    "RawBody",
    "RequestSpec",
    "SignedRequest",
    "body_from_value",
    "serialize_json",
    "PageSizeMm",
    "PageSizePoints",
    "PdfResizeMetadata",
    "PdfResizeRequest",
    "PdfResizeResult",
]
