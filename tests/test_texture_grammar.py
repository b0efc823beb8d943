import pytest

from isoedit.components.iso_coordinate import Direction, IsoCoordinate
from isoedit.rules.grammar import (
    ConstraintKind,
    MalformedRuleError,
    family_of,
    looks_like_fragment_texture,
    parse_texture_name,
    same_family,
)


def test_letter_form_sets_every_base_direction():
    rule = parse_texture_name("rock-11-u0,n*,e1,s=,w!,ddirt.png")
    assert rule.type_name == "rock"
    assert rule.slot == "11"
    assert [c.kind for c in rule.constraints] == [
        ConstraintKind.EMPTY,
        ConstraintKind.ANY,
        ConstraintKind.OCCUPIED,
        ConstraintKind.SAME_FAMILY,
        ConstraintKind.OTHER_FAMILY,
        ConstraintKind.EXACT,
    ]
    assert rule.constraint_for(Direction.DOWN).literal == "dirt"
    assert rule.score == 16
    assert rule.elevation is None


def test_omitted_directions_default_to_dont_care():
    rule = parse_texture_name("rock-12-u0")
    assert len(rule.constraints) == 6
    assert rule.constraint_for(Direction.UP).kind is ConstraintKind.EMPTY
    for direction in (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST, Direction.DOWN):
        assert rule.constraint_for(direction).kind is ConstraintKind.ANY
    assert rule.score == 2


def test_colon_form_and_compound_paths():
    rule = parse_texture_name("rock-11-w:0,wu:1,u:!.png")
    base = rule.constraints[:6]
    compound = rule.constraints[6:]
    assert [c.path for c in base] == [(d,) for d in (
        Direction.UP, Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST, Direction.DOWN,
    )]
    assert len(compound) == 1
    assert compound[0].path == (Direction.WEST, Direction.UP)
    assert compound[0].offset == IsoCoordinate(0, -1, 1)
    assert compound[0].kind is ConstraintKind.OCCUPIED
    assert compound[0].token() == "wu:1"
    assert rule.score == 7


def test_weights_rank_literal_over_family_over_presence():
    exact = parse_texture_name("rock-11-wdirt").score
    family = parse_texture_name("rock-11-w=").score
    presence = parse_texture_name("rock-11-w1").score
    dont_care = parse_texture_name("rock-11-w*").score
    assert exact > family > presence > dont_care == 0


def test_elevation_suffix():
    rule = parse_texture_name("wall-21-s0-2:1.png")
    assert rule.elevation == (2, 1)
    assert rule.elevation_matches(0)
    assert not rule.elevation_matches(1)
    assert rule.elevation_matches(2)
    assert rule.elevation_matches(-2)
    assert not rule.elevation_matches(-1)


def test_elevation_remainder_zero_never_matches():
    rule = parse_texture_name("wall-21-s0-2:0")
    assert not any(rule.elevation_matches(u) for u in range(-4, 5))


def test_variant_type_keeps_its_family():
    rule = parse_texture_name("dirt_grass1-22-s!.png")
    assert rule.type_name == "dirt_grass1"
    assert rule.family == "dirt"


@pytest.mark.parametrize(
    "name",
    [
        "",
        "rock",
        "rock-11",
        "rock-11-",
        "rock-99-u0",
        "Rock-11-u0",
        "rock-11-x0",
        "rock-11-u?",
        "rock-11-u0,u1",
        "rock-11-w:0,w1",
        "rock-11-wq:0",
        "rock-11-u0-2",
        "rock-11-u0-a:b",
        "rock-11-u0-0:1",
        "rock-11-u0-2:1-extra",
    ],
)
def test_malformed_identifiers_are_rejected(name):
    with pytest.raises(MalformedRuleError):
        parse_texture_name(name)


def test_malformed_rule_error_is_a_value_error():
    assert issubclass(MalformedRuleError, ValueError)


def test_looks_like_fragment_texture():
    assert looks_like_fragment_texture("rock-11-u0.png")
    assert looks_like_fragment_texture("rock-11-u?.png")
    assert not looks_like_fragment_texture("flower.png")
    assert not looks_like_fragment_texture("large-rock.png")


def test_family_helpers():
    assert family_of("dirt_grass2") == "dirt"
    assert family_of("rock") == "rock"
    assert same_family("dirt", "dirt_pile")
    assert not same_family("dirt", "rock")
    assert not same_family(None, "rock")
    assert not same_family(None, None)


def test_constraint_satisfaction_against_absent_neighbour():
    rule = parse_texture_name("rock-11-u=,n!")
    up = rule.constraint_for(Direction.UP)
    north = rule.constraint_for(Direction.NORTH)
    assert not up.is_satisfied(None, "rock")
    assert north.is_satisfied(None, "rock")
    assert up.is_satisfied("rock_moss", "rock")
    assert not north.is_satisfied("rock_moss", "rock")
