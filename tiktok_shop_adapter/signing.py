"""Request signing and canonicalization for the TikTok Shop Open API.

Every signed call carries ``app_key``, ``timestamp`` (Unix seconds) and
``sign``. The signature is an HMAC-SHA256 (keyed by the app secret, lowercase
hex) over::

    app_secret + path + canonical_query + canonical_body + app_secret

where ``canonical_query`` is ``key1value1key2value2...`` over the query keys in
code-point order, minus ``sign`` and ``access_token`` (compared
case-insensitively), and ``canonical_body`` is the compact JSON / raw text of
the body, or an empty string for multipart uploads and empty bodies.
"""

import hashlib
import hmac
import math
import time
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
from urllib.parse import quote

from .errors import ErrorKind, ServiceError
from .models.request_models import (
    Body,
    CanonicalSignatureInput,
    Credentials,
    SignedRequest,
    body_from_value,
)

EXCLUDED_SIGNATURE_KEYS = frozenset({"sign", "access_token"})
DEFAULT_CONTENT_TYPE = "application/json"
MULTIPART_CONTENT_TYPE = "multipart/form-data"

# Same unreserved set as JavaScript's encodeURIComponent.
_PATH_SEGMENT_SAFE = "!~*'()"


def encode_path_segment(value: Any) -> str:
    """Percent-encode an identifier for use as a single path segment."""
    return quote(str(value), safe=_PATH_SEGMENT_SAFE)


def normalize_path(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def stringify_query_value(value: Any) -> str:
    """
    Convert a query value to the string sent on the wire and signed.

    Booleans become ``true``/``false``, integral floats lose their fraction
    (``10.0`` -> ``"10"``) and sequences are comma-joined.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else stringify_query_value(item) for item in value)
    return str(value)


def normalize_query(query: Optional[Mapping[str, Any]]) -> Tuple[Dict[str, str], Dict[str, str]]:
    """
    Split a caller query into wire parameters and signature parameters.

    ``None`` values are dropped. A caller supplied ``sign`` never reaches the
    wire (it is recomputed); ``access_token`` is sent but not signed.

    Returns:
        (request_params, signature_params)
    """
    request_params: Dict[str, str] = {}
    signature_params: Dict[str, str] = {}
    if not query:
        return request_params, signature_params

    for key, value in query.items():
        if value is None:
            continue
        key = str(key)
        lowered = key.lower()
        if lowered == "sign":
            continue
        text = stringify_query_value(value)
        request_params[key] = text
        if lowered != "access_token":
            signature_params[key] = text
    return request_params, signature_params


def build_canonical_query(params: Mapping[str, str]) -> str:
    return "".join(
        f"{key}{params[key]}"
        for key in sorted(params)
        if key.lower() not in EXCLUDED_SIGNATURE_KEYS
    )


def resolve_content_type(headers: Optional[Mapping[str, str]]) -> str:
    if headers:
        for key, value in headers.items():
            if key.lower() == "content-type":
                return value
    return DEFAULT_CONTENT_TYPE


def is_multipart(headers: Optional[Mapping[str, str]]) -> bool:
    return resolve_content_type(headers).strip().lower().startswith(MULTIPART_CONTENT_TYPE)


def build_canonical_body(body: Body, headers: Optional[Mapping[str, str]] = None) -> str:
    """Canonical body text; empty for multipart uploads and blank bodies."""
    if is_multipart(headers):
        return ""
    try:
        return body.signing_text()
    except (TypeError, ValueError) as exc:
        raise ServiceError(
            f"Request body is not JSON serializable: {exc}",
            kind=ErrorKind.VALIDATION,
        ) from exc


def compute_signature(app_secret: str, canonical: CanonicalSignatureInput) -> str:
    message = (
        app_secret
        + canonical.canonical_path
        + canonical.canonical_query
        + canonical.canonical_body
        + app_secret
    )
    return hmac.new(
        app_secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def sign(
    path: str,
    query: Optional[Mapping[str, Any]],
    body: Any,
    app_key: str,
    app_secret: str,
    timestamp: int,
    headers: Optional[Mapping[str, str]] = None,
) -> SignedRequest:
    """
    Sign a request.

    Args:
        path: Request path, identifiers already percent-encoded
        query: Caller query parameters
        body: Request body (any value accepted by ``body_from_value``)
        app_key: Application key
        app_secret: Application secret, used as HMAC key and message bookends
        timestamp: Unix timestamp in seconds
        headers: Request headers, consulted for the content type

    Returns:
        SignedRequest with the full wire parameters (``sign`` last)
    """
    canonical_path = normalize_path(path)
    request_params, signature_params = normalize_query(query)
    timestamp_text = str(int(timestamp))

    canonical = CanonicalSignatureInput(
        canonical_path=canonical_path,
        canonical_query=build_canonical_query(
            {**signature_params, "app_key": app_key, "timestamp": timestamp_text}
        ),
        canonical_body=build_canonical_body(body_from_value(body), headers),
    )
    signature = compute_signature(app_secret, canonical)

    params = {**request_params, "app_key": app_key, "timestamp": timestamp_text}
    params["sign"] = signature

    return SignedRequest(
        path=canonical_path,
        params=params,
        signature=signature,
        timestamp=int(timestamp),
        canonical=canonical,
    )


class Signer:
    """
    Signs requests with bound credentials and an injectable clock.

    The clock returns epoch seconds; production uses ``time.time``.
    """

    def __init__(self, credentials: Credentials, clock: Optional[Callable[[], float]] = None):
        self.credentials = credentials
        self.clock = clock or time.time

    def timestamp(self) -> int:
        return int(math.floor(self.clock()))

    def sign(
        self,
        path: str,
        query: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> SignedRequest:
        return sign(
            path,
            query,
            body,
            app_key=self.credentials.app_key,
            app_secret=self.credentials.app_secret,
            timestamp=self.timestamp(),
            headers=headers,
        )
