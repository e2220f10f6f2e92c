"""
Conversion between :class:`Params` and the gateway's flat XML documents.
"""

from __future__ import annotations

from typing import Optional, Union

from lxml import etree

from .errors import CodecError
from .params import Params, stringify
from .schemas import MessageSchema

__all__ = ["build_notify_reply", "decode", "encode"]


def _parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)


def encode(params: Params, root: str = "xml") -> bytes:
    document = etree.Element(root)
    for key in params:
        if params.get(key) is None:
            # None means unset
            continue
        try:
            child = etree.SubElement(document, key)
            child.text = stringify(params.get(key))
        except ValueError as exc:
            raise CodecError(f"cannot encode field {key!r}: {exc}") from exc
    return etree.tostring(document, encoding="utf-8")


def decode(data: Union[bytes, str], schema: Optional[MessageSchema] = None) -> Params:
    """
    Parse a flat document into a :class:`Params`.

    Integer fields declared by ``schema`` are converted to ``int``; every other
    field stays a string, and so does an empty integer field.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data or not data.strip():
        raise CodecError("empty XML document")
    try:
        document = etree.fromstring(data, _parser())
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise CodecError(f"malformed XML document: {exc}") from exc

    params = Params()
    for child in document:
        if not isinstance(child.tag, str):
            # comments and processing instructions
            continue
        if len(child):
            raise CodecError(f"element <{child.tag}> is not a flat field")
        text = child.text or ""
        field_type = schema.field_type(child.tag) if schema is not None else str
        if field_type is int and text.strip():
            try:
                params.add(child.tag, int(text.strip()))
            except ValueError as exc:
                raise CodecError(f"{child.tag} is not an integer: {text!r}") from exc
        else:
            params.add(child.tag, text)
    return params


def build_notify_reply(success: bool = True, message: str = "OK") -> bytes:
    """Acknowledgement body returned to the gateway after a notification."""
    reply = Params()
    reply.add("return_code", "SUCCESS" if success else "FAIL")
    reply.add("return_msg", message)
    return encode(reply)
