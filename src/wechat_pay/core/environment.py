"""
Layered merchant settings: process environment, a ``.env`` file, overrides.

:func:`build_environment` returns the plain mapping that
:meth:`wechat_pay.core.config.PayConfig.from_mapping` reads.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional, Tuple

__all__ = ["build_environment", "load_env_file"]

_QUOTES = "'\""


def _parse_line(line: str) -> Optional[Tuple[str, str]]:
    line = line.strip()
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = (part.strip() for part in line.split("=", 1))
    if not key:
        return None
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return key, value[1:-1]
    # unquoted values may carry a trailing " # comment"
    value = value.split(" #", 1)[0].rstrip()
    return key, value


def _read_env_file(path: Path) -> Dict[str, str]:
    if not path.is_file():
        return {}
    pairs = (_parse_line(line) for line in path.read_text(encoding="utf-8").splitlines())
    return dict(pair for pair in pairs if pair is not None)


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Copy settings from ``path`` into ``environ`` (default :data:`os.environ`).

    Keys already set are left alone. Returns a snapshot of the result.
    """
    target: MutableMapping[str, str] = os.environ if environ is None else environ
    for key, value in _read_env_file(Path(path)).items():
        target.setdefault(key, value)
    return dict(target)


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Merge settings from, lowest precedence first: ``env_file``, ``base``
    (default :data:`os.environ`), ``overrides``.

    A missing ``env_file`` is skipped, as is ``env_file=None``.
    """
    merged: Dict[str, str] = {}
    if env_file is not None:
        merged.update(_read_env_file(Path(env_file)))
    merged.update(os.environ if base is None else base)
    merged.update(overrides or {})
    return merged
