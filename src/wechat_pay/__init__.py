"""
Public facade for the WeChat Pay merchant client package.

The most useful pieces are re-exported so integrators can
``from wechat_pay import ...`` without navigating the package.
"""

from .api import create_pay_client, handle_refund_notify, query_refund
from .core import (
    CodecError,
    ConfigError,
    CryptoError,
    H5ShareConfig,
    MissingPayloadError,
    Params,
    PayClient,
    PayConfig,
    PayParameters,
    ProtocolError,
    RefundNotification,
    SignatureError,
    TransportError,
    ValidationError,
    WeChatPayError,
    build_environment,
    build_notify_reply,
    decode,
    decode_req_info,
    encode,
    load_env_file,
    load_pay_config,
    sign,
    validate,
    verify,
)

__all__ = (
    "CodecError",
    "ConfigError",
    "CryptoError",
    "H5ShareConfig",
    "MissingPayloadError",
    "Params",
    "PayClient",
    "PayConfig",
    "PayParameters",
    "ProtocolError",
    "RefundNotification",
    "SignatureError",
    "TransportError",
    "ValidationError",
    "WeChatPayError",
    "build_environment",
    "build_notify_reply",
    "create_pay_client",
    "decode",
    "decode_req_info",
    "encode",
    "handle_refund_notify",
    "load_env_file",
    "load_pay_config",
    "query_refund",
    "sign",
    "validate",
    "verify",
)
