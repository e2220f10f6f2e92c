"""
Configuration objects and helpers for a merchant account.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .environment import build_environment
from .signing import SIGN_TYPE_MD5, SUPPORTED_SIGN_TYPES

__all__ = [
    "ConfigError",
    "DEFAULT_BASE_URL",
    "PayConfig",
    "PayParameters",
    "load_pay_config",
]

DEFAULT_BASE_URL = "https://api.mch.weixin.qq.com"

_PARAMETER_TO_ENV_KEY = {
    "app_id": "WECHAT_PAY_APP_ID",
    "mch_id": "WECHAT_PAY_MCH_ID",
    "api_key": "WECHAT_PAY_API_KEY",
    "base_url": "WECHAT_PAY_BASE_URL",
    "notify_url": "WECHAT_PAY_NOTIFY_URL",
    "sign_type": "WECHAT_PAY_SIGN_TYPE",
    "timeout_seconds": "WECHAT_PAY_TIMEOUT_SECONDS",
}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class PayParameters:
    """
    Explicit parameter bundle for constructing :class:`PayConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_pay_config`.
    """

    app_id: Optional[str] = None
    mch_id: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    notify_url: Optional[str] = None
    sign_type: Optional[str] = None
    timeout_seconds: Optional[float | int | str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[PayParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown pay parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


def _require(values: Mapping[str, str], env_key: str) -> str:
    value = (values.get(env_key) or "").strip()
    if not value:
        raise ConfigError(f"{env_key} must be provided")
    return value


@dataclass(frozen=True)
class PayConfig:
    app_id: str
    mch_id: str
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    notify_url: Optional[str] = None
    sign_type: str = SIGN_TYPE_MD5
    timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        for name in ("app_id", "mch_id", "api_key"):
            if not getattr(self, name):
                raise ConfigError(f"{name} must not be empty")
        if self.sign_type not in SUPPORTED_SIGN_TYPES:
            raise ConfigError(
                f"sign_type must be one of {', '.join(SUPPORTED_SIGN_TYPES)}, got '{self.sign_type}'"
            )
        if self.timeout_seconds <= 0:
            raise ConfigError("timeout_seconds must be positive")

    def __repr__(self) -> str:
        return (
            f"PayConfig(app_id={self.app_id!r}, mch_id={self.mch_id!r}, "
            f"api_key='***', base_url={self.base_url!r})"
        )

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "PayConfig":
        app_id = _require(values, "WECHAT_PAY_APP_ID")
        mch_id = _require(values, "WECHAT_PAY_MCH_ID")
        api_key = _require(values, "WECHAT_PAY_API_KEY")

        base_url = (values.get("WECHAT_PAY_BASE_URL") or DEFAULT_BASE_URL).strip().rstrip("/")
        notify_url = values.get("WECHAT_PAY_NOTIFY_URL") or None
        sign_type = (values.get("WECHAT_PAY_SIGN_TYPE") or SIGN_TYPE_MD5).strip().upper()

        timeout_raw = values.get("WECHAT_PAY_TIMEOUT_SECONDS") or "30"
        try:
            timeout_seconds = float(timeout_raw)
        except ValueError as exc:
            raise ConfigError(
                f"WECHAT_PAY_TIMEOUT_SECONDS must be a number, got '{timeout_raw}'"
            ) from exc

        return cls(
            app_id=app_id,
            mch_id=mch_id,
            api_key=api_key,
            base_url=base_url,
            notify_url=notify_url,
            sign_type=sign_type,
            timeout_seconds=timeout_seconds,
        )

    @classmethod
    def from_env(
        cls,
        *,
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
    ) -> "PayConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "app_id": app_id,
                "mch_id": mch_id,
                "api_key": api_key,
                "base_url": base_url,
                "notify_url": notify_url,
                "sign_type": sign_type,
                "timeout_seconds": timeout_seconds,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        variables = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(variables)


def load_pay_config(
    *,
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
) -> PayConfig:
    """
    Convenience wrapper that mirrors :meth:`PayConfig.from_env`.

    The configuration can come from environment variables, a ``.env`` file,
    direct keyword arguments, or any combination of the three.
    """
    return PayConfig.from_env(
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
