"""Player alias table loaded from a JSON resource."""

from __future__ import annotations

import json
from collections import defaultdict
from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path

from pickledger.matching.normalize import normalize_name

TABLES_DIR = Path(__file__).with_name("tables")
PLAYER_ALIASES_PATH = TABLES_DIR / "player_aliases.json"


class AliasTable:
    """Canonical normalized name -> known alias spellings, searchable both ways."""

    def __init__(self, entries: Mapping[str, Iterable[str]]) -> None:
        self._aliases: dict[str, frozenset[str]] = {}
        self._keys_by_alias: dict[str, set[str]] = defaultdict(set)
        for key, aliases in entries.items():
            canonical = normalize_name(key)
            normalized = frozenset(filter(None, (normalize_name(alias) for alias in aliases)))
            self._aliases[canonical] = self._aliases.get(canonical, frozenset()) | normalized
            for alias in normalized:
                self._keys_by_alias[alias].add(canonical)

    def __len__(self) -> int:
        return len(self._aliases)

    def __contains__(self, name: str) -> bool:
        return name in self._aliases

    def aliases_of(self, canonical: str) -> frozenset[str]:
        return self._aliases.get(canonical, frozenset())

    def canonical_keys(self, normalized: str) -> set[str]:
        """Every canonical key this normalized name is, or is an alias of."""

        keys = set(self._keys_by_alias.get(normalized, ()))
        if normalized in self._aliases:
            keys.add(normalized)
        return keys

    def related(self, first: str, second: str) -> bool:
        return bool(self.canonical_keys(first) & self.canonical_keys(second))

    @classmethod
    def from_json(cls, path: Path) -> "AliasTable":
        return cls(json.loads(path.read_text(encoding="utf-8")))


@lru_cache(maxsize=1)
def default_alias_table() -> AliasTable:
    return AliasTable.from_json(PLAYER_ALIASES_PATH)
