"""
The generic parameter container used for outbound requests and decoded replies.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple, Union

from .errors import ParamTypeError

__all__ = ["Params", "stringify"]


def stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


class Params:
    """
    Ordered mapping from parameter name to a string, integer or bytes value.

    Keys keep their insertion order for encoding; :meth:`sorted_pairs` yields
    the byte-wise ordering the signature is computed over.
    """

    def __init__(self, values: Optional[Union["Params", Mapping[str, Any]]] = None) -> None:
        self._values: Dict[str, Any] = {}
        if values:
            self.update(values)

    def add(self, key: str, value: Any) -> None:
        self._values[key] = value

    def update(self, values: Union["Params", Mapping[str, Any]]) -> None:
        for key, value in values.items():
            self.add(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def all_keys(self) -> Set[str]:
        return set(self._values)

    def get_str(self, key: str) -> Optional[str]:
        value = self._values.get(key)
        if value is None:
            return None
        try:
            return stringify(value)
        except UnicodeDecodeError as exc:
            raise ParamTypeError(f"{key} is not valid UTF-8 text") from exc

    def get_int(self, key: str) -> Optional[int]:
        value = self._values.get(key)
        if value is None:
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        try:
            return int(stringify(value))
        except (TypeError, ValueError) as exc:
            raise ParamTypeError(f"{key} is not an integer: {value!r}") from exc

    def sorted_pairs(self, exclude: Optional[str] = "sign") -> List[Tuple[str, str]]:
        keys = sorted(
            (key for key in self._values if key != exclude),
            key=lambda key: key.encode("utf-8"),
        )
        return [(key, stringify(self._values[key])) for key in keys]

    def items(self) -> List[Tuple[str, Any]]:
        return list(self._values.items())

    def copy(self) -> "Params":
        return Params(self._values)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Params):
            return self._values == other._values
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Params({self._values!r})"
