"""
HTTP client for the WeChat Pay merchant API.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

import requests

from .config import PayConfig
from .crypto import decode_req_info
from .errors import MissingPayloadError, ResultCodeError, ReturnCodeError, TransportError
from .params import Params
from .schemas import (
    REFUND_NOTIFY,
    REFUND_QUERY_REQUEST,
    REFUND_QUERY_RESPONSE,
    UNIFIED_ORDER_REQUEST,
    UNIFIED_ORDER_RESPONSE,
    MessageSchema,
)
from .signing import SIGN_TYPE_MD5, resolve_sign_type, sign, sign_jsapi, verify
from .validation import SIGN_KEY, validate
from .xmlcodec import decode, encode

__all__ = [
    "CONTENT_TYPE_XML",
    "H5ShareConfig",
    "PayClient",
    "REFUND_QUERY_PATH",
    "RefundNotification",
    "UNIFIED_ORDER_PATH",
    "post_xml",
]

CONTENT_TYPE_XML = "application/xml;charset=utf-8"
UNIFIED_ORDER_PATH = "/pay/unifiedorder"
REFUND_QUERY_PATH = "/pay/refundquery"
SUCCESS = "SUCCESS"


def post_xml(
    session: requests.Session,
    url: str,
    body: bytes,
    *,
    content_type: str = CONTENT_TYPE_XML,
    timeout: float = 30,
) -> bytes:
    try:
        response = session.post(
            url,
            data=body,
            headers={"Content-Type": content_type},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise TransportError(f"Request to {url} failed: {exc}") from exc
    if response.status_code >= 400:
        raise TransportError(
            f"Gateway responded with {response.status_code}: {response.text}"
        )
    return response.content


def _check_status(result: Params) -> None:
    return_code = result.get_str("return_code")
    if return_code != SUCCESS:
        raise ReturnCodeError(
            result.get_str("return_msg") or f"return_code is {return_code or 'missing'}",
            return_code=return_code,
        )
    result_code = result.get_str("result_code")
    if result_code != SUCCESS:
        raise ResultCodeError(
            result.get_str("err_code_des") or f"result_code is {result_code or 'missing'}",
            return_code=return_code,
            result_code=result_code,
            err_code=result.get_str("err_code"),
        )


@dataclass(frozen=True)
class RefundNotification:
    """The outer notification envelope and its decrypted refund details."""

    outer: Params
    info: Params

    @property
    def refund_status(self) -> Optional[str]:
        return self.info.get_str("refund_status")

    @property
    def out_refund_no(self) -> Optional[str]:
        return self.info.get_str("out_refund_no")


@dataclass(frozen=True)
class H5ShareConfig:
    app_id: str
    timestamp: int
    nonce_str: str
    signature: str


def _new_nonce() -> str:
    return uuid.uuid4().hex


class PayClient:
    """
    Merchant API client bound to one :class:`PayConfig`.

    The client keeps a shared parameter set that :meth:`unified_order` draws
    its defaults from. Each operation builds its own bag, so concurrent calls on
    the same client only contend on the lock guarding that shared set.
    """

    def __init__(
        self,
        config: PayConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self._owns_session = session is None
        self.session = session or requests.Session()
        self._lock = threading.Lock()
        self._params = Params()

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "PayClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def set_params(self, params: Mapping[str, Any]) -> None:
        with self._lock:
            self._params = Params(params)

    def add_param(self, key: str, value: Any) -> None:
        with self._lock:
            self._params.add(key, value)

    def add_params(self, params: Mapping[str, Any]) -> None:
        with self._lock:
            self._params.update(params)

    def del_param(self, key: str) -> None:
        with self._lock:
            self._params.delete(key)

    @property
    def params(self) -> Params:
        with self._lock:
            return self._params.copy()

    def _build_params(
        self,
        schema: MessageSchema,
        params: Optional[Union[Params, Mapping[str, Any]]],
        *,
        use_shared: bool = True,
    ) -> Params:
        bag = Params()
        if use_shared:
            allowed = schema.rules.allowed
            shared = self.params
            for key in shared:
                if key in allowed:
                    bag.add(key, shared.get(key))
        if params is not None:
            bag.update(params)
        bag.add("appid", self.config.app_id)
        bag.add("mch_id", self.config.mch_id)
        if not bag.get("nonce_str"):
            bag.add("nonce_str", _new_nonce())
        return bag

    def _sign_type_for(self, bag: Params) -> str:
        # an explicit sign_type in the bag wins over the configured default
        explicit = bag.get_str("sign_type")
        return resolve_sign_type(explicit if explicit else self.config.sign_type)

    def _call(
        self,
        request_schema: MessageSchema,
        response_schema: MessageSchema,
        path: str,
        bag: Params,
    ) -> Params:
        sign_type = self._sign_type_for(bag)
        if sign_type != SIGN_TYPE_MD5 and not bag.get("sign_type"):
            # the gateway assumes MD5 unless told otherwise
            bag.add("sign_type", sign_type)
        validate(bag, request_schema.rules)
        bag.add(SIGN_KEY, sign(bag, self.config.api_key, sign_type))

        url = self.config.url(path)
        logging.info("Submitting %s to %s", request_schema.name, url)
        raw = post_xml(
            self.session,
            url,
            encode(bag, root=request_schema.root),
            content_type=CONTENT_TYPE_XML,
            timeout=self.config.timeout_seconds,
        )

        result = decode(raw, response_schema)
        _check_status(result)
        verify(result, self.config.api_key, sign_type)
        return result

    def query_refund(self, params: Union[Params, Mapping[str, Any]]) -> Params:
        """
        Query the state of a refund.

        ``params`` must name exactly one of ``transaction_id``, ``out_trade_no``,
        ``out_refund_no`` or ``refund_id``.

        Only ``params`` and the configured identity are sent; the shared
        parameter set is not consulted.
        """
        bag = self._build_params(REFUND_QUERY_REQUEST, params, use_shared=False)
        return self._call(REFUND_QUERY_REQUEST, REFUND_QUERY_RESPONSE, REFUND_QUERY_PATH, bag)

    def unified_order(
        self,
        params: Optional[Union[Params, Mapping[str, Any]]] = None,
    ) -> Params:
        """
        Place an order and return the gateway reply carrying ``prepay_id``.

        Without ``params`` the order is built from the client's shared
        parameter set alone.
        """
        bag = self._build_params(UNIFIED_ORDER_REQUEST, params)
        if not bag.get("notify_url") and self.config.notify_url:
            bag.add("notify_url", self.config.notify_url)
        return self._call(UNIFIED_ORDER_REQUEST, UNIFIED_ORDER_RESPONSE, UNIFIED_ORDER_PATH, bag)

    def handle_refund_notify(self, body: Union[bytes, str]) -> RefundNotification:
        outer = decode(body, REFUND_NOTIFY)
        return_code = outer.get_str("return_code")
        if return_code != SUCCESS:
            raise ReturnCodeError(
                outer.get_str("return_msg") or f"return_code is {return_code or 'missing'}",
                return_code=return_code,
            )
        if outer.get(SIGN_KEY):
            verify(outer, self.config.api_key, self._sign_type_for(outer))

        req_info = outer.get_str("req_info")
        if not req_info:
            raise MissingPayloadError("refund notification without req_info")
        info = decode_req_info(req_info, self.config.api_key)
        logging.info(
            "Received refund notification for %s", info.get_str("out_refund_no")
        )
        return RefundNotification(outer=outer, info=info)

    def share_h5_config(
        self,
        ticket: str,
        url: str,
        *,
        nonce_str: Optional[str] = None,
        now: Optional[int] = None,
    ) -> H5ShareConfig:
        """
        Build the ``wx.config`` payload for sharing an H5 page.

        ``ticket`` is the JS-SDK ticket obtained by the caller.
        """
        timestamp = int(time.time()) if now is None else now
        nonce = nonce_str if nonce_str is not None else _new_nonce()[:16]
        return H5ShareConfig(
            app_id=self.config.app_id,
            timestamp=timestamp,
            nonce_str=nonce,
            signature=sign_jsapi(ticket, url, nonce, timestamp),
        )
