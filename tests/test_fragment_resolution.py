from isoedit.components.iso_coordinate import Direction, IsoCoordinate
from isoedit.rules.registry import RuleRegistry
from isoedit.rules.resolution import (
    FragmentQuery,
    Neighborhood,
    is_rule_valid,
    resolve_fragment_texture,
)


def _query(type_name, slot, neighbours=None, elevation=0):
    neighborhood = Neighborhood.from_mapping(neighbours or {})
    return FragmentQuery(type_name=type_name, slot=slot, neighborhood=neighborhood, elevation=elevation)


def test_more_specific_rule_wins():
    registry = RuleRegistry.build(["rock-12-n*.png", "rock-12-ndirt.png"])
    result = resolve_fragment_texture(registry, _query("rock", "12", {Direction.NORTH: "dirt"}))
    assert result.texture == "rock-12-ndirt.png"
    assert result.score == 6
    assert result.fallback is None


def test_dont_care_matches_absent_neighbour():
    registry = RuleRegistry.build(["rock-12-n*.png", "rock-12-ndirt.png"])
    result = resolve_fragment_texture(registry, _query("rock", "12"))
    assert result.texture == "rock-12-n*.png"


def test_no_valid_candidate_resolves_to_nothing():
    registry = RuleRegistry.build(["rock-12-u0.png"])
    assert resolve_fragment_texture(registry, _query("rock", "12", {Direction.UP: "rock"})) is None
    assert resolve_fragment_texture(registry, _query("rock", "13")) is None
    assert resolve_fragment_texture(registry, _query("dirt", "12")) is None


def test_upper_corner_ignores_up_constraint_as_last_resort():
    registry = RuleRegistry.build(["rock-11-u0,w0.png"])
    result = resolve_fragment_texture(registry, _query("rock", "11", {Direction.UP: "rock"}))
    assert result.texture == "rock-11-u0,w0.png"
    assert result.fallback == "ignore_up"

    # Other constraints still apply during the fallback.
    blocked = _query("rock", "11", {Direction.UP: "rock", Direction.WEST: "rock"})
    assert resolve_fragment_texture(registry, blocked) is None


def test_non_corner_slot_has_no_up_fallback():
    registry = RuleRegistry.build(["rock-12-u0.png"])
    assert resolve_fragment_texture(registry, _query("rock", "12", {Direction.UP: "rock"})) is None


def test_strict_match_beats_up_fallback():
    registry = RuleRegistry.build(["rock-11-u0,w0,n0.png", "rock-11-u1.png"])
    result = resolve_fragment_texture(registry, _query("rock", "11", {Direction.UP: "rock"}))
    assert result.texture == "rock-11-u1.png"
    assert result.fallback is None


def test_compound_up_path_is_not_ignored():
    registry = RuleRegistry.build(["rock-14-u0,nu:0.png"])
    neighbours = {Direction.UP: "rock", IsoCoordinate(-1, 0, 1): "rock"}
    assert resolve_fragment_texture(registry, _query("rock", "14", neighbours)) is None
    result = resolve_fragment_texture(registry, _query("rock", "14", {Direction.UP: "rock"}))
    assert result.fallback == "ignore_up"


def test_variant_falls_back_to_base_family_with_penalty():
    registry = RuleRegistry.build(["dirt-22-s0.png", "dirt_grass1-11-u0.png"])
    result = resolve_fragment_texture(registry, _query("dirt_grass1", "22"))
    assert result.texture == "dirt-22-s0.png"
    assert result.score == 1
    assert result.fallback == "family"


def test_family_fallback_only_when_variant_has_no_match():
    registry = RuleRegistry.build(["dirt-22-s0,e0.png", "dirt_grass1-22-s*.png"])
    result = resolve_fragment_texture(registry, _query("dirt_grass1", "22"))
    assert result.texture == "dirt_grass1-22-s*.png"
    assert result.fallback is None


def test_family_fallback_can_use_up_relaxation():
    registry = RuleRegistry.build(["dirt-11-u0.png"])
    result = resolve_fragment_texture(registry, _query("dirt_pile", "11", {Direction.UP: "dirt"}))
    assert result.texture == "dirt-11-u0.png"
    assert result.fallback == "family_ignore_up"


def test_base_type_has_no_family_fallback():
    registry = RuleRegistry.build(["dirt_grass1-22-s0.png"])
    assert resolve_fragment_texture(registry, _query("dirt", "22")) is None


def test_elevation_constraint_filters_candidates():
    registry = RuleRegistry.build(["wall-21-s0-2:1.png", "wall-21-s0-2:2.png"])
    even = resolve_fragment_texture(registry, _query("wall", "21", elevation=4))
    odd = resolve_fragment_texture(registry, _query("wall", "21", elevation=3))
    below_ground = resolve_fragment_texture(registry, _query("wall", "21", elevation=-1))
    assert even.texture == "wall-21-s0-2:1.png"
    assert odd.texture == "wall-21-s0-2:2.png"
    assert below_ground.texture == "wall-21-s0-2:2.png"


def test_ties_break_on_identifier_name_regardless_of_input_order():
    names = ["rock-21-s0.png", "rock-21-e0.png", "rock-21-w0.png"]
    first = resolve_fragment_texture(RuleRegistry.build(names), _query("rock", "21"))
    second = resolve_fragment_texture(RuleRegistry.build(reversed(names)), _query("rock", "21"))
    assert first.texture == second.texture == "rock-21-e0.png"


def test_family_symbols_with_absent_neighbour():
    registry = RuleRegistry.build(["rock-23-e!.png"])
    assert resolve_fragment_texture(registry, _query("rock", "23")).texture == "rock-23-e!.png"
    assert resolve_fragment_texture(registry, _query("rock", "23", {Direction.EAST: "rock_moss"})) is None
    assert resolve_fragment_texture(registry, _query("rock", "23", {Direction.EAST: "dirt"})) is not None

    same = RuleRegistry.build(["rock-23-e=.png"])
    assert resolve_fragment_texture(same, _query("rock", "23")) is None
    assert resolve_fragment_texture(same, _query("rock", "23", {Direction.EAST: "rock_moss"})) is not None


def test_is_rule_valid_reads_the_neighbourhood_live():
    cells = {}
    neighborhood = Neighborhood(cells.get)
    rule = RuleRegistry.build(["rock-12-u0.png"]).candidates_for("rock", "12")[0]
    query = FragmentQuery(type_name="rock", slot="12", neighborhood=neighborhood)
    assert is_rule_valid(rule, query)
    cells[IsoCoordinate(0, 0, 1)] = "dirt"
    assert not is_rule_valid(rule, query)
    assert is_rule_valid(rule, query, ignore_up=True)
