"""Fragment texture resolution.

For one fragment of one tile, pick the most specific authored texture whose
rule holds against the tile's current neighbourhood, or nothing.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Optional, Sequence, Union

from isoedit.components.iso_coordinate import Direction, IsoCoordinate, path_offset
from isoedit.constants import FAMILY_FALLBACK_PENALTY, UPPER_CORNER_SLOTS
from isoedit.rules.grammar import TextureRule, family_of, same_family
from isoedit.rules.registry import RuleRegistry

NeighborLookup = Callable[[IsoCoordinate], Optional[str]]


class Neighborhood:
    """Live view of what occupies the cells around a tile.

    Wraps a lookup from relative offset to type name (``None`` when empty);
    nothing is cached, every read asks the map again.
    """

    def __init__(self, lookup: NeighborLookup):
        self._lookup = lookup

    @classmethod
    def empty(cls) -> Neighborhood:
        return cls(lambda offset: None)

    @classmethod
    def from_mapping(cls, types: Mapping[Union[Direction, IsoCoordinate], str]) -> Neighborhood:
        """Fixed neighbourhood keyed by direction or relative offset."""
        by_offset = {
            (key.offset if isinstance(key, Direction) else key): value
            for key, value in types.items()
        }
        return cls(by_offset.get)

    def at(self, path: Union[Direction, Iterable[Direction], IsoCoordinate]) -> Optional[str]:
        offset = path if isinstance(path, IsoCoordinate) else path_offset(path)
        return self._lookup(offset)

    def __getitem__(self, direction: Direction) -> Optional[str]:
        return self.at(direction)


@dataclass(frozen=True, slots=True)
class FragmentQuery:
    type_name: str
    slot: str
    neighborhood: Neighborhood
    elevation: int = 0


@dataclass(frozen=True, slots=True)
class Resolution:
    """Winning rule for a fragment.

    ``score`` is the effective score (family fallbacks are penalised);
    ``fallback`` names the relaxation that produced the match, if any.
    """

    rule: TextureRule
    score: int
    fallback: Optional[str] = None

    @property
    def texture(self) -> str:
        return self.rule.name


def is_rule_valid(rule: TextureRule, query: FragmentQuery, *, ignore_up: bool = False) -> bool:
    if not rule.elevation_matches(query.elevation):
        return False
    for constraint in rule.constraints:
        if ignore_up and constraint.path == (Direction.UP,):
            continue
        neighbor_type = query.neighborhood.at(constraint.path)
        if not constraint.is_satisfied(neighbor_type, query.type_name):
            return False
    return True


def _best(rules: Sequence[TextureRule]) -> Optional[TextureRule]:
    if not rules:
        return None
    # max() keeps the first of equal scores, buckets are name-sorted.
    return max(rules, key=lambda rule: rule.score)


def _resolve_for(registry: RuleRegistry, lookup_type: str, query: FragmentQuery):
    candidates = registry.candidates_for(lookup_type, query.slot)
    if not candidates:
        return None, None
    winner = _best([rule for rule in candidates if is_rule_valid(rule, query)])
    if winner is not None:
        return winner, None
    if query.slot in UPPER_CORNER_SLOTS:
        winner = _best([rule for rule in candidates if is_rule_valid(rule, query, ignore_up=True)])
        if winner is not None:
            return winner, "ignore_up"
    return None, None


def resolve_fragment_texture(registry: RuleRegistry, query: FragmentQuery) -> Optional[Resolution]:
    """Return the best texture for ``query`` or ``None`` when nothing should be drawn."""
    rule, fallback = _resolve_for(registry, query.type_name, query)
    if rule is not None:
        return Resolution(rule=rule, score=rule.score, fallback=fallback)
    family = family_of(query.type_name)
    if family == query.type_name:
        return None
    rule, fallback = _resolve_for(registry, family, query)
    if rule is None:
        return None
    return Resolution(
        rule=rule,
        score=rule.score - FAMILY_FALLBACK_PENALTY,
        fallback="family_ignore_up" if fallback else "family",
    )


__all__ = [
    "FragmentQuery",
    "Neighborhood",
    "NeighborLookup",
    "Resolution",
    "is_rule_valid",
    "resolve_fragment_texture",
    "same_family",
]
