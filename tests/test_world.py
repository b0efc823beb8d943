from isoedit.components.map_grid import MapGrid
from isoedit.events.bus import EventBus
from isoedit.world import build_default_registry, create_world


def test_create_world_wires_systems_around_one_grid():
    world = create_world(EventBus())
    assert len(list(world.get_component(MapGrid))) == 1
    assert world.map_system.registry.has_type("rock")
    assert world.brush_system.map_system is world.map_system


def test_create_world_loads_initial_map():
    world = create_world(EventBus(), map_data={"tiles": {"0,0,0": "dirt", "0,0,1": "rock"}})
    assert world.map_system.tile_count == 2
    assert world.map_system.tile_type_at((0, 0, 1)) == "rock"


def test_default_registry_accepts_extra_identifiers():
    registry = build_default_registry(["wall-21-s0-2:1.png", "flower.png"])
    assert registry.has_type("wall")
    assert not registry.has_type("flower")
    assert registry.has_type("rock_moss")
