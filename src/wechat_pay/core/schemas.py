"""
Field tables for every message exchanged with the gateway.

Each table lists the fields of one message together with their wire type and
whether the field is required, part of a one-of group, or optional. The codec
reads the types, the validator reads the presence rules.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Type

from .validation import ParamRules

__all__ = [
    "Field",
    "MessageSchema",
    "Presence",
    "REFUND_NOTIFY",
    "REFUND_NOTIFY_INFO",
    "REFUND_QUERY_REQUEST",
    "REFUND_QUERY_RESPONSE",
    "UNIFIED_ORDER_REQUEST",
    "UNIFIED_ORDER_RESPONSE",
]


class Presence(enum.Enum):
    REQUIRED = "required"
    ONE_OF = "one_of"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class Field:
    name: str
    type: Type = str
    presence: Presence = Presence.OPTIONAL

    @property
    def indexed(self) -> bool:
        # refund_fee_$n, coupon_refund_id_$n_$m
        return "$" in self.name

    def pattern(self) -> re.Pattern[str]:
        escaped = re.escape(self.name)
        for placeholder in (r"\$n", r"\$m"):
            escaped = escaped.replace(placeholder, r"\d+")
        return re.compile(escaped + r"\Z")


def _req(name: str, type_: Type = str) -> Field:
    return Field(name, type_, Presence.REQUIRED)


def _one(name: str, type_: Type = str) -> Field:
    return Field(name, type_, Presence.ONE_OF)


def _opt(name: str, type_: Type = str) -> Field:
    return Field(name, type_, Presence.OPTIONAL)


@dataclass(frozen=True)
class MessageSchema:
    name: str
    fields: Tuple[Field, ...]
    root: str = "xml"
    _by_name: Dict[str, Field] = field(init=False, repr=False, compare=False)
    _indexed: Tuple[Tuple[re.Pattern[str], Field], ...] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_by_name", {f.name: f for f in self.fields if not f.indexed}
        )
        object.__setattr__(
            self, "_indexed", tuple((f.pattern(), f) for f in self.fields if f.indexed)
        )

    def lookup(self, name: str) -> Optional[Field]:
        found = self._by_name.get(name)
        if found is not None:
            return found
        for pattern, candidate in self._indexed:
            if pattern.match(name):
                return candidate
        return None

    def field_type(self, name: str) -> Type:
        found = self.lookup(name)
        return found.type if found is not None else str

    def _names(self, presence: Presence) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.presence is presence)

    @property
    def rules(self) -> ParamRules:
        return ParamRules(
            must=self._names(Presence.REQUIRED),
            one_of=self._names(Presence.ONE_OF),
            optional=self._names(Presence.OPTIONAL),
        )


_STATUS_FIELDS = (
    _opt("return_code"),
    _opt("return_msg"),
    _opt("result_code"),
    _opt("err_code"),
    _opt("err_code_des"),
    _opt("appid"),
    _opt("mch_id"),
    _opt("nonce_str"),
    _opt("sign"),
)


REFUND_QUERY_REQUEST = MessageSchema(
    "refund_query_request",
    (
        _req("appid"),
        _req("mch_id"),
        _req("nonce_str"),
        _req("sign"),
        _one("transaction_id"),
        _one("out_trade_no"),
        _one("out_refund_no"),
        _one("refund_id"),
        _opt("sign_type"),
        _opt("offset", int),
    ),
)

REFUND_QUERY_RESPONSE = MessageSchema(
    "refund_query_response",
    _STATUS_FIELDS
    + (
        _opt("total_refund_count", int),
        _opt("transaction_id"),
        _opt("out_trade_no"),
        _opt("total_fee", int),
        _opt("settlement_total_fee", int),
        _opt("fee_type"),
        _opt("cash_fee", int),
        _opt("refund_count", int),
        _opt("out_refund_no_$n"),
        _opt("refund_id_$n"),
        _opt("refund_channel_$n"),
        _opt("refund_fee_$n", int),
        _opt("settlement_refund_fee_$n", int),
        _opt("coupon_type_$n_$m"),
        _opt("coupon_refund_fee_$n", int),
        _opt("coupon_refund_count_$n", int),
        _opt("coupon_refund_id_$n_$m"),
        _opt("coupon_refund_fee_$n_$m", int),
        _opt("refund_status_$n"),
        _opt("refund_account_$n"),
        _opt("refund_recv_accout_$n"),
        _opt("refund_success_time_$n"),
    ),
)

UNIFIED_ORDER_REQUEST = MessageSchema(
    "unified_order_request",
    (
        _req("appid"),
        _req("mch_id"),
        _req("nonce_str"),
        _req("sign"),
        _req("body"),
        _req("out_trade_no"),
        _req("total_fee", int),
        _req("spbill_create_ip"),
        _req("notify_url"),
        _req("trade_type"),
        _opt("device_info"),
        _opt("sign_type"),
        _opt("detail"),
        _opt("attach"),
        _opt("fee_type"),
        _opt("time_start"),
        _opt("time_expire"),
        _opt("goods_tag"),
        _opt("product_id"),
        _opt("limit_pay"),
        _opt("openid"),
        _opt("receipt"),
        _opt("scene_info"),
    ),
)

UNIFIED_ORDER_RESPONSE = MessageSchema(
    "unified_order_response",
    _STATUS_FIELDS
    + (
        _opt("device_info"),
        _opt("trade_type"),
        _opt("prepay_id"),
        _opt("code_url"),
        _opt("mweb_url"),
    ),
)

REFUND_NOTIFY = MessageSchema(
    "refund_notify",
    (
        _opt("return_code"),
        _opt("return_msg"),
        _opt("appid"),
        _opt("mch_id"),
        _opt("nonce_str"),
        _opt("sign"),
        _opt("req_info"),
    ),
)

REFUND_NOTIFY_INFO = MessageSchema(
    "refund_notify_info",
    (
        _opt("transaction_id"),
        _opt("out_trade_no"),
        _opt("refund_id"),
        _opt("out_refund_no"),
        _opt("total_fee", int),
        _opt("settlement_total_fee", int),
        _opt("refund_fee", int),
        _opt("settlement_refund_fee", int),
        _opt("refund_status"),
        _opt("success_time"),
        _opt("refund_recv_accout"),
        _opt("refund_account"),
        _opt("refund_request_source"),
    ),
    root="root",
)
