"""
Core primitives that implement the WeChat Pay signed request/response protocol.
"""

from .client import (
    H5ShareConfig,
    PayClient,
    RefundNotification,
    post_xml,
)
from .config import (
    ConfigError,
    PayConfig,
    PayParameters,
    load_pay_config,
)
from .crypto import decode_req_info, decrypt_req_info, derive_key, encrypt_req_info
from .environment import build_environment, load_env_file
from .errors import (
    Base64DecodeError,
    CodecError,
    ConflictingParametersError,
    CryptoError,
    DecryptError,
    MissingOneOfError,
    MissingParameterError,
    MissingPayloadError,
    PaddingError,
    ParamTypeError,
    ProtocolError,
    ResultCodeError,
    ReturnCodeError,
    SignatureError,
    TransportError,
    UnexpectedParameterError,
    UnsupportedSignTypeError,
    ValidationError,
    WeChatPayError,
)
from .params import Params
from .schemas import Field, MessageSchema, Presence
from .signing import (
    SIGN_TYPE_HMAC_SHA256,
    SIGN_TYPE_MD5,
    canonical_string,
    sign,
    sign_jsapi,
    verify,
)
from .validation import ParamRules, validate
from .xmlcodec import build_notify_reply, decode, encode

__all__ = [
    "Base64DecodeError",
    "CodecError",
    "ConfigError",
    "ConflictingParametersError",
    "CryptoError",
    "DecryptError",
    "Field",
    "H5ShareConfig",
    "MessageSchema",
    "MissingOneOfError",
    "MissingParameterError",
    "MissingPayloadError",
    "PaddingError",
    "ParamRules",
    "ParamTypeError",
    "Params",
    "PayClient",
    "PayConfig",
    "PayParameters",
    "Presence",
    "ProtocolError",
    "RefundNotification",
    "ResultCodeError",
    "ReturnCodeError",
    "SIGN_TYPE_HMAC_SHA256",
    "SIGN_TYPE_MD5",
    "SignatureError",
    "TransportError",
    "UnexpectedParameterError",
    "UnsupportedSignTypeError",
    "ValidationError",
    "WeChatPayError",
    "build_environment",
    "build_notify_reply",
    "canonical_string",
    "decode",
    "decode_req_info",
    "decrypt_req_info",
    "derive_key",
    "encode",
    "encrypt_req_info",
    "load_env_file",
    "load_pay_config",
    "post_xml",
    "sign",
    "sign_jsapi",
    "validate",
    "verify",
]
