"""
Request signing and response verification for the merchant API.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Optional

from .errors import SignatureError, UnsupportedSignTypeError
from .params import Params
from .validation import SIGN_KEY

__all__ = [
    "SIGN_TYPE_HMAC_SHA256",
    "SIGN_TYPE_MD5",
    "SUPPORTED_SIGN_TYPES",
    "canonical_string",
    "resolve_sign_type",
    "sign",
    "sign_jsapi",
    "verify",
]

SIGN_TYPE_MD5 = "MD5"
SIGN_TYPE_HMAC_SHA256 = "HMAC-SHA256"
SUPPORTED_SIGN_TYPES = (SIGN_TYPE_MD5, SIGN_TYPE_HMAC_SHA256)


def resolve_sign_type(sign_type: Optional[str]) -> str:
    """
    Map a ``sign_type`` value to a supported algorithm.

    An absent or empty value means MD5. Anything else that is not one of
    :data:`SUPPORTED_SIGN_TYPES` is rejected rather than silently downgraded.
    """
    if not sign_type:
        return SIGN_TYPE_MD5
    if sign_type not in SUPPORTED_SIGN_TYPES:
        raise UnsupportedSignTypeError(sign_type)
    return sign_type


def canonical_string(params: Params, api_key: str) -> str:
    pairs = [f"{key}={value}" for key, value in params.sorted_pairs(exclude=SIGN_KEY) if value != ""]
    pairs.append(f"key={api_key}")
    return "&".join(pairs)


def sign(params: Params, api_key: str, sign_type: Optional[str] = None) -> str:
    """
    Compute the upper-case hex signature of ``params``.

    ``sign_type`` defaults to the bag's own ``sign_type`` field. Any ``sign``
    already present in the bag is left out of the computation.
    """
    algorithm = resolve_sign_type(sign_type if sign_type is not None else params.get_str("sign_type"))
    payload = canonical_string(params, api_key).encode("utf-8")
    if algorithm == SIGN_TYPE_HMAC_SHA256:
        digest = hmac.new(api_key.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    else:
        digest = hashlib.md5(payload).hexdigest()
    return digest.upper()


def verify(params: Params, api_key: str, sign_type: Optional[str] = None) -> None:
    carried = params.get_str(SIGN_KEY)
    if not carried:
        raise SignatureError("response carries no sign")
    expected = sign(params, api_key, sign_type)
    if not hmac.compare_digest(carried.encode("utf-8"), expected.encode("utf-8")):
        raise SignatureError("sign mismatch")


def sign_jsapi(ticket: str, url: str, nonce_str: str, timestamp: int) -> str:
    """Signature for the JS-SDK ``wx.config`` call of an H5 page."""
    payload = f"jsapi_ticket={ticket}&noncestr={nonce_str}&timestamp={timestamp}&url={url}"
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()
