"""Player name matching across inconsistent data feeds.

``names_match`` is a fixed rule cascade, evaluated in order with the first
hit winning:

1. exact match after normalization
2. two-token names compared in reversed order ("Wang Xinyu" / "Xinyu Wang")
3. alias table, both directions and through a shared canonical key
4. equal surnames, or one name's first token equal to the other's last
5. a single-token name found as a whole word in the longer name

Rules 4 and 5 only fire for tokens longer than ``MIN_TOKEN_LENGTH`` so that
short, common tokens do not collide. Team codes are not names; use
``pickledger.matching.teams`` for those.
"""

from __future__ import annotations

from collections.abc import Iterable

from pickledger.matching.aliases import AliasTable, default_alias_table
from pickledger.matching.normalize import name_tokens, normalize_name, reverse_name_order

MIN_TOKEN_LENGTH = 4


def _long_enough(token: str) -> bool:
    return len(token) > MIN_TOKEN_LENGTH


def names_match(first: str, second: str, aliases: AliasTable | None = None) -> bool:
    n1 = normalize_name(first)
    n2 = normalize_name(second)
    if not n1 or not n2:
        return False

    if n1 == n2:
        return True

    if n1 == reverse_name_order(n2) or reverse_name_order(n1) == n2:
        return True

    table = aliases or default_alias_table()
    if table.related(n1, n2):
        return True

    parts1 = name_tokens(n1)
    parts2 = name_tokens(n2)
    last1, last2 = parts1[-1], parts2[-1]
    if last1 == last2 and _long_enough(last1):
        return True
    if parts1[0] == last2 and _long_enough(parts1[0]):
        return True
    if parts2[0] == last1 and _long_enough(parts2[0]):
        return True

    search, target = (parts1, parts2) if len(n1) < len(n2) else (parts2, parts1)
    if len(search) == 1 and _long_enough(search[0]) and search[0] in target:
        return True

    return False


def resolve_player(name: str, roster: Iterable[str], aliases: AliasTable | None = None) -> str | None:
    """Return the first roster entry that denotes ``name``, or ``None`` when unresolved."""

    for candidate in roster:
        if names_match(candidate, name, aliases):
            return candidate
    return None
