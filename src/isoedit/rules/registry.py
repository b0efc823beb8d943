from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterable, List, Mapping, Set, Tuple

from isoedit.components.iso_coordinate import IsoCoordinate
from isoedit.rules.grammar import (
    ConstraintKind,
    MalformedRuleError,
    TextureRule,
    looks_like_fragment_texture,
    parse_texture_name,
)

log = logging.getLogger(__name__)


class RuleRegistry:
    """Read-only index of texture rules by type then fragment slot.

    Each bucket is sorted by identifier name, which makes resolution
    independent of the order the catalogue was scanned in.
    """

    def __init__(self, rules: Mapping[str, Mapping[str, Iterable[TextureRule]]] | None = None) -> None:
        self._rules: Dict[str, Dict[str, Tuple[TextureRule, ...]]] = {}
        for type_name, by_slot in (rules or {}).items():
            self._rules[type_name] = {
                slot: tuple(sorted(bucket, key=lambda rule: rule.name))
                for slot, bucket in by_slot.items()
            }
        self._dependency_offsets = self._collect_dependency_offsets()

    @classmethod
    def build(cls, identifiers: Iterable[str]) -> RuleRegistry:
        return RuleRegistryBuilder().add_all(identifiers).build()

    def candidates_for(self, type_name: str, slot: str) -> Tuple[TextureRule, ...]:
        return self._rules.get(type_name, {}).get(slot, ())

    def has_type(self, type_name: str) -> bool:
        return type_name in self._rules

    def types(self) -> Tuple[str, ...]:
        return tuple(sorted(self._rules))

    def rules(self) -> Tuple[TextureRule, ...]:
        return tuple(
            rule
            for type_name in sorted(self._rules)
            for slot in sorted(self._rules[type_name])
            for rule in self._rules[type_name][slot]
        )

    def dependency_offsets(self) -> FrozenSet[IsoCoordinate]:
        """Offsets from an edited cell to the tiles whose rules may look at it."""
        return self._dependency_offsets

    def __len__(self) -> int:
        return sum(len(bucket) for by_slot in self._rules.values() for bucket in by_slot.values())

    def __contains__(self, name: object) -> bool:
        return any(rule.name == name for rule in self.rules())

    def _collect_dependency_offsets(self) -> FrozenSet[IsoCoordinate]:
        offsets: Set[IsoCoordinate] = set()
        for by_slot in self._rules.values():
            for bucket in by_slot.values():
                for rule in bucket:
                    for constraint in rule.constraints:
                        if constraint.kind is not ConstraintKind.ANY:
                            offsets.add(-constraint.offset)
        return frozenset(offsets)


class RuleRegistryBuilder:
    """Collects texture identifiers from one or more catalogues, then builds a registry."""

    def __init__(self) -> None:
        self._parsed: Dict[str, TextureRule] = {}
        self.rejected: List[Tuple[str, str]] = []

    def add(self, identifier: str) -> RuleRegistryBuilder:
        if identifier in self._parsed:
            return self
        try:
            rule = parse_texture_name(identifier)
        except MalformedRuleError as exc:
            self.rejected.append((str(identifier), str(exc)))
            if isinstance(identifier, str) and looks_like_fragment_texture(identifier):
                log.warning("Skipping malformed texture identifier: %s", exc)
            else:
                log.debug("Ignoring non-fragment asset %r", identifier)
            return self
        self._parsed[identifier] = rule
        return self

    def add_all(self, identifiers: Iterable[str]) -> RuleRegistryBuilder:
        for identifier in identifiers:
            self.add(identifier)
        return self

    def add_atlas(self, atlas: Mapping[str, object]) -> RuleRegistryBuilder:
        """Index every frame name of a sprite-sheet atlas (``{"frames": {...}}``)."""
        frames = atlas.get("frames", {})
        if not isinstance(frames, Mapping):
            raise ValueError("Atlas 'frames' must be a mapping of frame names")
        return self.add_all(frames.keys())

    def build(self) -> RuleRegistry:
        grouped: Dict[str, Dict[str, List[TextureRule]]] = {}
        for rule in self._parsed.values():
            grouped.setdefault(rule.type_name, {}).setdefault(rule.slot, []).append(rule)
        registry = RuleRegistry(grouped)
        log.debug(
            "Built rule registry: %d rules for %d types (%d identifiers rejected)",
            len(registry),
            len(registry.types()),
            len(self.rejected),
        )
        return registry


__all__ = ["RuleRegistry", "RuleRegistryBuilder"]
