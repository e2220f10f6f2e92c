"""
Exception hierarchy shared by the WeChat Pay primitives.

Every error raised by the core derives from :class:`WeChatPayError` so callers
can catch the whole family, while the subclasses let them tell a caller
mistake apart from an integrity failure or a wrong merchant key.
"""

from __future__ import annotations

from typing import Optional, Sequence

__all__ = [
    "Base64DecodeError",
    "CodecError",
    "ConflictingParametersError",
    "CryptoError",
    "DecryptError",
    "MissingOneOfError",
    "MissingParameterError",
    "MissingPayloadError",
    "PaddingError",
    "ParamTypeError",
    "ProtocolError",
    "ResultCodeError",
    "ReturnCodeError",
    "SignatureError",
    "TransportError",
    "UnexpectedParameterError",
    "UnsupportedSignTypeError",
    "ValidationError",
    "WeChatPayError",
]


class WeChatPayError(Exception):
    """Base class for every error raised by this package."""


class ParamTypeError(WeChatPayError, ValueError):
    """Raised when a typed read cannot coerce the stored value."""


class ValidationError(WeChatPayError):
    """The outbound parameter set violates the operation's rule set."""


class MissingParameterError(ValidationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"missing required parameter `{name}`")
        self.name = name


class UnexpectedParameterError(ValidationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"unexpected parameter `{name}`")
        self.name = name


class MissingOneOfError(ValidationError):
    def __init__(self, choices: Sequence[str]) -> None:
        super().__init__(f"need one of {'/'.join(choices)}")
        self.choices = tuple(choices)


class ConflictingParametersError(ValidationError):
    def __init__(self, present: Sequence[str]) -> None:
        super().__init__(f"more than one of {'/'.join(present)}")
        self.present = tuple(present)


class UnsupportedSignTypeError(WeChatPayError):
    def __init__(self, sign_type: str) -> None:
        super().__init__(f"unsupported sign_type '{sign_type}'")
        self.sign_type = sign_type


class SignatureError(WeChatPayError):
    """The carried signature does not match the recomputed one."""


class TransportError(WeChatPayError):
    """The HTTP exchange with the gateway failed."""


class ProtocolError(WeChatPayError):
    """The gateway answered with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        return_code: Optional[str] = None,
        result_code: Optional[str] = None,
        err_code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.return_code = return_code
        self.result_code = result_code
        self.err_code = err_code


class ReturnCodeError(ProtocolError):
    """``return_code`` is absent or not ``SUCCESS``."""


class ResultCodeError(ProtocolError):
    """``result_code`` is absent or not ``SUCCESS``."""


class MissingPayloadError(WeChatPayError):
    """A refund notification arrived without its encrypted ``req_info``."""


class CodecError(WeChatPayError):
    """The XML document could not be parsed into a flat parameter set."""


class CryptoError(WeChatPayError):
    """Base class for failures of the ``req_info`` decryption pipeline."""


class Base64DecodeError(CryptoError):
    pass


class DecryptError(CryptoError):
    pass


class PaddingError(CryptoError):
    pass
