"""
Rule sets describing which parameters an outbound operation accepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from .errors import (
    ConflictingParametersError,
    MissingOneOfError,
    MissingParameterError,
    UnexpectedParameterError,
)
from .params import Params

__all__ = ["ParamRules", "SIGN_KEY", "validate"]

SIGN_KEY = "sign"


@dataclass(frozen=True)
class ParamRules:
    must: Tuple[str, ...] = ()
    one_of: Tuple[str, ...] = ()
    optional: Tuple[str, ...] = ()

    @property
    def allowed(self) -> FrozenSet[str]:
        return frozenset(self.must) | frozenset(self.one_of) | frozenset(self.optional)


def validate(params: Params, rules: ParamRules) -> None:
    """
    Check ``params`` against ``rules`` and raise on the first violation.

    The one-of group is checked first, then the required keys (the signature
    is added after validation and is never required here), then every key
    present in the bag must be on the allow-list.
    """
    if rules.one_of:
        present = [key for key in rules.one_of if params.get(key) is not None]
        if not present:
            raise MissingOneOfError(rules.one_of)
        if len(present) > 1:
            raise ConflictingParametersError(present)

    for key in rules.must:
        if key == SIGN_KEY:
            continue
        if params.get(key) is None:
            raise MissingParameterError(key)

    allowed = rules.allowed
    for key in params:
        if key not in allowed:
            raise UnexpectedParameterError(key)
