from __future__ import annotations

from isoedit.rules.grammar import (
    ConstraintKind,
    DirectionConstraint,
    MalformedRuleError,
    TextureRule,
    family_of,
    parse_texture_name,
    same_family,
)
from isoedit.rules.registry import RuleRegistry, RuleRegistryBuilder
from isoedit.rules.resolution import (
    FragmentQuery,
    Neighborhood,
    Resolution,
    is_rule_valid,
    resolve_fragment_texture,
)

__all__ = [
    "ConstraintKind",
    "DirectionConstraint",
    "FragmentQuery",
    "MalformedRuleError",
    "Neighborhood",
    "Resolution",
    "RuleRegistry",
    "RuleRegistryBuilder",
    "TextureRule",
    "family_of",
    "is_rule_valid",
    "parse_texture_name",
    "resolve_fragment_texture",
    "same_family",
]
