"""Key selection parsed from a converter option."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Sequence, Tuple, Union

__all__ = [
    "AllKeys",
    "OneKey",
    "ManyKeys",
    "KeySelection",
    "parse_selection",
]


@dataclass(frozen=True, slots=True)
class AllKeys:
    """Select every entry of the snapshot, sorted by key."""

    def select(self, snapshot: Mapping[str, object]) -> List[Tuple[str, object]]:
        return [(key, snapshot[key]) for key in sorted(snapshot)]


@dataclass(frozen=True, slots=True)
class OneKey:
    """Select a single key; rendered as its bare value."""

    key: str

    def select(self, snapshot: Mapping[str, object]) -> List[Tuple[str, object]]:
        if self.key in snapshot:
            return [(self.key, snapshot[self.key])]
        return []


@dataclass(frozen=True, slots=True)
class ManyKeys:
    """Select several keys in the order they were configured."""

    keys: Tuple[str, ...] = ()

    def select(self, snapshot: Mapping[str, object]) -> List[Tuple[str, object]]:
        return [(key, snapshot[key]) for key in self.keys if key in snapshot]


KeySelection = Union[AllKeys, OneKey, ManyKeys]


def _tokens(option: str) -> Iterable[str]:
    for part in option.split(","):
        token = part.strip()
        if token:
            yield token


def parse_selection(option: str | Sequence[str] | None) -> KeySelection:
    """Turn a raw option into a :data:`KeySelection`.

    ``None`` (or an empty sequence) selects every key. A string is split on
    commas, trimmed and de-duplicated with the written order kept. A sequence
    of strings is treated as the concatenation of its elements' tokens.
    """

    if option is None:
        return AllKeys()
    if isinstance(option, str):
        raw = list(_tokens(option))
    else:
        if not option:
            return AllKeys()
        raw = [token for item in option for token in _tokens(str(item))]

    keys: List[str] = []
    seen: set[str] = set()
    for token in raw:
        if token in seen:
            continue
        seen.add(token)
        keys.append(token)

    if len(keys) == 1:
        return OneKey(keys[0])
    return ManyKeys(tuple(keys))
