"""World-bounds enforcement."""

from echozero.core.data_structures import ComponentKind, EntityId, Transform
from echozero.simulation.system import System


class WorldBoundsSystem(System):
    """Clamps x and y into the terrain extents after all movement. z is free."""

    required_components = (ComponentKind.TRANSFORM,)

    def process_entity(self, entity_id: EntityId, delta_time: float) -> None:
        transform: Transform = self.store.get_component(entity_id, ComponentKind.TRANSFORM)
        min_x, max_x, min_y, max_y = self.config.terrain.bounds
        transform.position.x = max(min_x, min(max_x, transform.position.x))
        transform.position.y = max(min_y, min(max_y, transform.position.y))
