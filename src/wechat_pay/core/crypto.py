"""
Decryption of the ``req_info`` field carried by refund notifications.

The gateway encrypts the refund details with AES-256-ECB and PKCS#7 padding.
The key is the lower-case hex MD5 of the merchant API key, used as 32 ASCII
bytes, and the cipher text travels base64-encoded.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
from typing import Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import Base64DecodeError, DecryptError, PaddingError
from .params import Params
from .schemas import REFUND_NOTIFY_INFO
from .xmlcodec import decode

__all__ = [
    "BLOCK_SIZE",
    "decode_req_info",
    "decrypt_req_info",
    "derive_key",
    "encrypt_req_info",
]

BLOCK_SIZE = 16


def derive_key(api_key: str) -> bytes:
    return hashlib.md5(api_key.encode("utf-8")).hexdigest().lower().encode("ascii")


def _cipher(api_key: str) -> Cipher:
    return Cipher(algorithms.AES(derive_key(api_key)), modes.ECB())


def decrypt_req_info(req_info: Union[str, bytes], api_key: str) -> bytes:
    try:
        cipher_text = base64.b64decode(req_info, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise Base64DecodeError(f"req_info is not valid base64: {exc}") from exc

    if not cipher_text or len(cipher_text) % BLOCK_SIZE:
        raise DecryptError(
            f"cipher text length {len(cipher_text)} is not a positive multiple of {BLOCK_SIZE}"
        )

    decryptor = _cipher(api_key).decryptor()
    try:
        padded = decryptor.update(cipher_text) + decryptor.finalize()
    except ValueError as exc:
        raise DecryptError(str(exc)) from exc

    unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise PaddingError("invalid PKCS#7 padding, wrong api key?") from exc


def encrypt_req_info(plaintext: Union[str, bytes], api_key: str) -> str:
    """Inverse of :func:`decrypt_req_info`, used to simulate notifications."""
    if isinstance(plaintext, str):
        plaintext = plaintext.encode("utf-8")
    padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = _cipher(api_key).encryptor()
    cipher_text = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(cipher_text).decode("ascii")


def decode_req_info(req_info: Union[str, bytes], api_key: str) -> Params:
    return decode(decrypt_req_info(req_info, api_key), REFUND_NOTIFY_INFO)
