"""Pydantic models for outbound TikTok Shop requests."""

import json
from typing import Any, Dict, Literal, Optional, Tuple, Union
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _require_text(value: str, field_name: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{field_name} must be a non-empty string")
    return value


class Credentials(BaseModel):
    """App credentials used to sign requests."""
    app_key: str
    app_secret: str

    model_config = ConfigDict(frozen=True)

    @field_validator("app_key", "app_secret")
    @classmethod
    def _non_blank(cls, value: str, info) -> str:
        return _require_text(value, info.field_name)

    def __repr__(self) -> str:
        return f"Credentials(app_key={self.app_key!r}, app_secret='***')"


def serialize_json(value: Any) -> str:
    """Compact JSON with keys in insertion order and non-ASCII left as is."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class EmptyBody(BaseModel):
    """No request body."""
    kind: Literal["empty"] = "empty"

    model_config = ConfigDict(frozen=True)

    def signing_text(self) -> str:
        return ""

    def request_kwargs(self) -> Dict[str, Any]:
        return {}


class RawBody(BaseModel):
    """Raw bytes sent verbatim; signed as UTF-8 text."""
    kind: Literal["raw"] = "raw"
    content: bytes

    model_config = ConfigDict(frozen=True)

    def signing_text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def request_kwargs(self) -> Dict[str, Any]:
        return {"content": self.content}


class JsonBody(BaseModel):
    """
    Structured body serialized as compact JSON.

    Empty objects, arrays and strings are still transmitted but sign as an
    empty string.
    """
    kind: Literal["json"] = "json"
    value: Any

    model_config = ConfigDict(frozen=True)

    def is_blank(self) -> bool:
        return isinstance(self.value, (dict, list, tuple, str)) and len(self.value) == 0

    def signing_text(self) -> str:
        if self.is_blank():
            return ""
        return serialize_json(self.value)

    def request_kwargs(self) -> Dict[str, Any]:
        return {"content": serialize_json(self.value).encode("utf-8")}


class MultipartBody(BaseModel):
    """multipart/form-data upload; never part of the signature."""
    kind: Literal["multipart"] = "multipart"
    fields: Dict[str, str] = Field(default_factory=dict)
    # name -> (filename, content, content type)
    files: Dict[str, Tuple[str, bytes, Optional[str]]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def signing_text(self) -> str:
        return ""

    def request_kwargs(self) -> Dict[str, Any]:
        files = {
            name: (filename, content, mime) if mime else (filename, content)
            for name, (filename, content, mime) in self.files.items()
        }
        return {"data": dict(self.fields), "files": files}


Body = Union[EmptyBody, RawBody, JsonBody, MultipartBody]
BODY_TYPES = (EmptyBody, RawBody, JsonBody, MultipartBody)


def body_from_value(value: Any) -> Body:
    """Classify an arbitrary value into one of the body variants."""
    if isinstance(value, BODY_TYPES):
        return value
    if value is None:
        return EmptyBody()
    if isinstance(value, (bytes, bytearray)):
        return RawBody(content=bytes(value))
    if isinstance(value, str):
        return RawBody(content=value.encode("utf-8"))
    return JsonBody(value=value)


class CanonicalSignatureInput(BaseModel):
    """The exact strings that went into the signature."""
    canonical_path: str
    canonical_query: str
    canonical_body: str = ""

    model_config = ConfigDict(frozen=True)


class SignedRequest(BaseModel):
    """Result of signing: wire parameters plus the signature."""
    path: str
    params: Dict[str, str]
    signature: str
    timestamp: int
    canonical: CanonicalSignatureInput

    model_config = ConfigDict(frozen=True)


class RequestSpec(BaseModel):
    """A request before signing."""
    path: str
    method: str = "GET"
    query: Dict[str, Any] = Field(default_factory=dict)
    body: Any = None
    headers: Dict[str, str] = Field(default_factory=dict)
    access_token: Optional[str] = None
    proxy: Optional[str] = None
    timeout: Optional[float] = Field(None, gt=0)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        return value if value.startswith("/") else f"/{value}"

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()


class ProxySpec(BaseModel):
    """Parsed proxy configuration."""
    scheme: Literal["http", "https", "socks5", "socks5h"]
    host: str
    port: Optional[int] = Field(None, ge=1, le=65535)
    user: Optional[str] = None
    password: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def has_credentials(self) -> bool:
        return bool(self.user) and bool(self.password)

    @property
    def url(self) -> str:
        authority = self.host if self.port is None else f"{self.host}:{self.port}"
        if self.has_credentials:
            userinfo = f"{quote(self.user, safe='')}:{quote(self.password, safe='')}"
            authority = f"{userinfo}@{authority}"
        return f"{self.scheme}://{authority}"

    def __repr__(self) -> str:
        return f"ProxySpec(scheme={self.scheme!r}, host={self.host!r}, port={self.port!r})"
