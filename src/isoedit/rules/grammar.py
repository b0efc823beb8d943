"""Texture identifier grammar.

Fragment textures carry their own matching rule in their name::

    <type>-<slot>-<constraints>[-<mod>:<rem>][.png]

``constraints`` is a comma-separated list of ``<direction><rule>`` pairs. A
direction is a single letter (``u n e s w d``) glued to its rule (``u0``), or a
letter path followed by a colon (``w:0``, ``wu:1``) where the path ``wu`` means
"one step west then one step up". Rules are ``*`` (don't care), ``0`` (empty),
``1`` (occupied), ``=`` (same family), ``!`` (different family) or a literal
type name. Base directions that are not listed default to ``*``.

The optional ``<mod>:<rem>`` suffix restricts the texture to tiles whose
elevation satisfies ``u % mod == rem - 1``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from isoedit.components.iso_coordinate import (
    DIRECTIONS,
    Direction,
    DirectionPath,
    IsoCoordinate,
    path_offset,
)
from isoedit.constants import (
    FAMILY_SEPARATOR,
    FRAGMENT_SLOTS,
    TEXTURE_SUFFIX,
    WEIGHT_ANY,
    WEIGHT_EXACT,
    WEIGHT_FAMILY,
    WEIGHT_PRESENCE,
)

_TYPE_RE = re.compile(r"^[a-z0-9_]+$")
_PATH_RE = re.compile(r"^[unesdw]+$")
_ELEVATION_RE = re.compile(r"^(\d+):(\d+)$")


class MalformedRuleError(ValueError):
    """Raised when a texture identifier does not follow the rule grammar."""


class ConstraintKind(Enum):
    ANY = "*"
    EMPTY = "0"
    OCCUPIED = "1"
    SAME_FAMILY = "="
    OTHER_FAMILY = "!"
    EXACT = "type"

    @property
    def weight(self) -> int:
        return _WEIGHTS[self]


_WEIGHTS = {
    ConstraintKind.ANY: WEIGHT_ANY,
    ConstraintKind.EMPTY: WEIGHT_PRESENCE,
    ConstraintKind.OCCUPIED: WEIGHT_PRESENCE,
    ConstraintKind.SAME_FAMILY: WEIGHT_FAMILY,
    ConstraintKind.OTHER_FAMILY: WEIGHT_FAMILY,
    ConstraintKind.EXACT: WEIGHT_EXACT,
}
_SYMBOLS = {kind.value: kind for kind in ConstraintKind if kind is not ConstraintKind.EXACT}


def family_of(type_name: str) -> str:
    """``dirt_grass1`` belongs to the ``dirt`` family."""
    return type_name.split(FAMILY_SEPARATOR, 1)[0]


def same_family(type_a: Optional[str], type_b: Optional[str]) -> bool:
    """Whether two types share a family. An empty cell belongs to no family."""
    if type_a is None or type_b is None:
        return False
    if type_a == type_b:
        return True
    return family_of(type_a) == family_of(type_b)


@dataclass(frozen=True, slots=True)
class DirectionConstraint:
    """Requirement on the cell reached by following ``path`` from the tile."""

    path: DirectionPath
    kind: ConstraintKind = ConstraintKind.ANY
    literal: Optional[str] = None

    @property
    def offset(self) -> IsoCoordinate:
        return path_offset(self.path)

    @property
    def weight(self) -> int:
        return self.kind.weight

    @property
    def is_compound(self) -> bool:
        return len(self.path) > 1

    def is_satisfied(self, neighbor_type: Optional[str], own_type: str) -> bool:
        kind = self.kind
        if kind is ConstraintKind.ANY:
            return True
        if kind is ConstraintKind.EMPTY:
            return neighbor_type is None
        if kind is ConstraintKind.OCCUPIED:
            return neighbor_type is not None
        if kind is ConstraintKind.SAME_FAMILY:
            return same_family(neighbor_type, own_type)
        if kind is ConstraintKind.OTHER_FAMILY:
            return not same_family(neighbor_type, own_type)
        return neighbor_type == self.literal

    def token(self) -> str:
        path = "".join(direction.code for direction in self.path)
        rule = self.literal if self.kind is ConstraintKind.EXACT else self.kind.value
        return f"{path}:{rule}"


@dataclass(frozen=True, slots=True)
class TextureRule:
    """Parsed texture identifier.

    ``constraints`` always starts with the six base directions in
    up/north/east/south/west/down order, followed by compound paths.
    """

    name: str
    type_name: str
    slot: str
    constraints: Tuple[DirectionConstraint, ...]
    elevation: Optional[Tuple[int, int]] = None
    score: int = 0

    @property
    def family(self) -> str:
        return family_of(self.type_name)

    def constraint_for(self, direction: Direction) -> DirectionConstraint:
        for constraint in self.constraints:
            if constraint.path == (direction,):
                return constraint
        return DirectionConstraint(path=(direction,))

    def elevation_matches(self, elevation: int) -> bool:
        if self.elevation is None:
            return True
        modulus, remainder = self.elevation
        # Floor modulo: negative elevations wrap into [0, modulus).
        return elevation % modulus == remainder - 1


def looks_like_fragment_texture(name: str) -> bool:
    """Cheap pre-check separating fragment textures from other assets (``flower.png``)."""
    return len(_strip_suffix(name).split("-")) >= 3


def parse_texture_name(name: str) -> TextureRule:
    if not isinstance(name, str) or not name:
        raise MalformedRuleError(f"Texture identifier must be a non-empty string: {name!r}")
    parts = _strip_suffix(name).split("-")
    if len(parts) not in (3, 4):
        raise MalformedRuleError(f"'{name}': expected <type>-<slot>-<constraints>[-<mod>:<rem>]")
    type_name, slot, constraint_text = parts[0], parts[1], parts[2]
    if not _TYPE_RE.match(type_name):
        raise MalformedRuleError(f"'{name}': invalid type '{type_name}'")
    if slot not in FRAGMENT_SLOTS:
        raise MalformedRuleError(f"'{name}': unknown fragment slot '{slot}'")
    constraints = _parse_constraints(name, constraint_text)
    elevation = _parse_elevation(name, parts[3]) if len(parts) == 4 else None
    return TextureRule(
        name=name,
        type_name=type_name,
        slot=slot,
        constraints=constraints,
        elevation=elevation,
        score=sum(constraint.weight for constraint in constraints),
    )


def _strip_suffix(name: str) -> str:
    if name.endswith(TEXTURE_SUFFIX):
        return name[: -len(TEXTURE_SUFFIX)]
    return name


def _parse_constraints(name: str, text: str) -> Tuple[DirectionConstraint, ...]:
    if not text:
        raise MalformedRuleError(f"'{name}': empty constraint list")
    by_path: Dict[DirectionPath, DirectionConstraint] = {}
    compound: List[DirectionConstraint] = []
    for token in text.split(","):
        constraint = _parse_token(name, token)
        if constraint.path in by_path:
            path = "".join(direction.code for direction in constraint.path)
            raise MalformedRuleError(f"'{name}': direction '{path}' given more than once")
        by_path[constraint.path] = constraint
        if constraint.is_compound:
            compound.append(constraint)
    base = tuple(
        by_path.get((direction,), DirectionConstraint(path=(direction,)))
        for direction in DIRECTIONS
    )
    return base + tuple(compound)


def _parse_token(name: str, token: str) -> DirectionConstraint:
    if ":" in token:
        path_text, _, rule_text = token.partition(":")
        if not _PATH_RE.match(path_text):
            raise MalformedRuleError(f"'{name}': invalid direction path in '{token}'")
    else:
        path_text, rule_text = token[:1], token[1:]
        if not path_text or not _PATH_RE.match(path_text):
            raise MalformedRuleError(f"'{name}': invalid direction in '{token}'")
    path = tuple(Direction.from_code(code) for code in path_text)
    if rule_text in _SYMBOLS:
        return DirectionConstraint(path=path, kind=_SYMBOLS[rule_text])
    if _TYPE_RE.match(rule_text):
        return DirectionConstraint(path=path, kind=ConstraintKind.EXACT, literal=rule_text)
    raise MalformedRuleError(f"'{name}': invalid rule in '{token}'")


def _parse_elevation(name: str, text: str) -> Tuple[int, int]:
    match = _ELEVATION_RE.match(text)
    if not match:
        raise MalformedRuleError(f"'{name}': invalid elevation constraint '{text}'")
    modulus, remainder = int(match.group(1)), int(match.group(2))
    if modulus < 1:
        raise MalformedRuleError(f"'{name}': elevation modulus must be positive")
    return modulus, remainder
