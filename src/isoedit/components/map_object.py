from dataclasses import dataclass

@dataclass(slots=True)
class MapObject:
    """Decorative entity (flower, pine...) drawn from a single texture above its tile."""
    type_name: str
