"""
Multi-valued string maps used for headers, queries and form fields.

Encoding is deterministic: keys are sorted, each key's values keep insertion order.

Example:
    values = Values()
    values.add("b", "2")
    values.add("a", "x y")
    values.add("b", "1")
    values.encode()  # "a=x+y&b=2&b=1"
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from urllib.parse import parse_qsl, quote_plus


class Values:
    """Ordered-insertion map from string keys to lists of string values."""

    __slots__ = ("_data",)

    def __init__(self, initial: Mapping[str, Iterable[str]] | None = None) -> None:
        self._data: dict[str, list[str]] = {}
        if initial:
            for key, values in initial.items():
                for value in values:
                    self.add(key, value)

    @classmethod
    def parse(cls, query: str) -> Values:
        """
        Decode a query string (`a=1&a=2&b=`) into Values.

        Blank values are kept; pairs without `=` map to an empty string.
        """
        parsed = cls()
        for key, value in parse_qsl(query, keep_blank_values=True):
            parsed.add(key, value)
        return parsed

    def get(self, key: str) -> str:
        """Return the first value for `key`, or an empty string."""
        values = self._data.get(key)
        if not values:
            return ""
        return values[0]

    def get_all(self, key: str) -> list[str]:
        return list(self._data.get(key, ()))

    def set(self, key: str, value: str) -> None:
        self._data[key] = [value]

    def add(self, key: str, value: str) -> None:
        self._data.setdefault(key, []).append(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def has(self, key: str) -> bool:
        return key in self._data

    def items(self) -> Iterator[tuple[str, list[str]]]:
        for key, values in self._data.items():
            yield key, list(values)

    def copy(self) -> Values:
        return Values(self._data)

    def encode(self) -> str:
        """
        Encode as `application/x-www-form-urlencoded`.

        Keys are sorted ascending; keys and values are escaped with query rules
        (space becomes `+`). An empty map encodes to an empty string.
        """
        parts: list[str] = []
        for key in sorted(self._data):
            escaped_key = quote_plus(key, safe="")
            for value in self._data[key]:
                parts.append(f"{escaped_key}={quote_plus(value, safe='')}")
        return "&".join(parts)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Values):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"Values({self._data!r})"
