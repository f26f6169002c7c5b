import pytest

from echozero.core.data_structures import ComponentKind, Position, Transform
from echozero.simulation.bounds import WorldBoundsSystem


@pytest.fixture
def bounds(store, config):
    return WorldBoundsSystem(store, config)


def place(store, x, y, z=0.0):
    entity_id = store.create_entity()
    store.add_component(entity_id, ComponentKind.TRANSFORM, Transform(position=Position(x, y, z)))
    return store.get_component(entity_id, ComponentKind.TRANSFORM).position


class TestWorldBounds:
    """Positions are clamped into the 5000 x 5000 terrain centred on the origin."""

    def test_out_of_bounds_clamped(self, store, bounds):
        position = place(store, 3000.0, -4000.0, 750.0)
        bounds.update(0.1)
        assert (position.x, position.y) == (2500.0, -2500.0)
        assert position.z == 750.0

    def test_in_bounds_untouched(self, store, bounds):
        position = place(store, 12.5, -2499.0)
        bounds.update(0.1)
        assert (position.x, position.y) == (12.5, -2499.0)

    def test_disabled_system_does_nothing(self, store, bounds):
        position = place(store, 9000.0, 0.0)
        bounds.enabled = False
        bounds.update(0.1)
        assert position.x == 9000.0
