"""
Public, high-level helpers for talking to the WeChat Pay merchant API.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

import requests

from .core.client import PayClient, RefundNotification
from .core.config import ConfigError, PayConfig, PayParameters, load_pay_config
from .core.params import Params

__all__ = [
    "ConfigError",
    "PayClient",
    "PayConfig",
    "PayParameters",
    "create_pay_client",
    "handle_refund_notify",
    "query_refund",
]


def create_pay_client(
    *,
    config: Optional[PayConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[PayParameters] = None,
    app_id: Optional[str] = None,
    mch_id: Optional[str] = None,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    notify_url: Optional[str] = None,
    sign_type: Optional[str] = None,
    timeout_seconds: Optional[float | int | str] = None,
) -> PayClient:
    """
    Construct a :class:`PayClient`.

    Callers can either supply a ready-made :class:`PayConfig` or let the helper
    assemble one from environment data.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            parameters,
            app_id,
            mch_id,
            api_key,
            base_url,
            notify_url,
            sign_type,
            timeout_seconds,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built PayConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_pay_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            app_id=app_id,
            mch_id=mch_id,
            api_key=api_key,
            base_url=base_url,
            notify_url=notify_url,
            sign_type=sign_type,
            timeout_seconds=timeout_seconds,
        )
    return PayClient(cfg, session=session)


def query_refund(
    params: Union[Params, Mapping[str, Any]],
    *,
    config: Optional[PayConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
) -> Params:
    """
    One-shot refund query using a client built from ``config`` or the environment.
    """
    with create_pay_client(config=config, session=session, env_file=env_file) as client:
        return client.query_refund(params)


def handle_refund_notify(
    body: Union[bytes, str],
    *,
    config: Optional[PayConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
) -> RefundNotification:
    """
    Decode and decrypt a refund notification posted by the gateway.

    No request is sent; a session the helper creates itself is closed before
    returning.
    """
    with create_pay_client(config=config, session=session, env_file=env_file) as client:
        return client.handle_refund_notify(body)
