import dataclasses
import math
import random
from collections import deque

import pytest

from echozero.core.config import AIConfig
from echozero.core.data_structures import (
    AIController, AIState, ComponentKind, ConfusedBehavior, Drone, Position,
    RFReceiver, Transform, Waypoint
)
from echozero.simulation.ai import AISystem


def make_entity(store, position=(0.0, 0.0, 0.0), state=AIState.IDLE, drone=None):
    entity_id = store.create_entity()
    store.add_component(entity_id, ComponentKind.TRANSFORM, Transform(position=Position(*position)))
    store.add_component(entity_id, ComponentKind.RF_RECEIVER, RFReceiver())
    store.add_component(entity_id, ComponentKind.AI, AIController(state=state))
    if drone is not None:
        store.add_component(entity_id, ComponentKind.DRONE, drone)
    return entity_id


def with_confused_behavior(config, behavior):
    return dataclasses.replace(config, ai=AIConfig(jammed_duration=config.ai.jammed_duration,
                                                   confused_behavior=behavior))


@pytest.fixture
def ai_system(store, config, clock):
    return AISystem(store, config, clock, rng=random.Random(7))


class TestConfusion:
    """Jamming drives entities into CONFUSED for a fixed duration."""

    def test_jammed_receiver_confuses_then_recovers(self, store, ai_system):
        entity_id = make_entity(store)
        ai = store.get_component(entity_id, ComponentKind.AI)
        receiver = store.get_component(entity_id, ComponentKind.RF_RECEIVER)

        receiver.jammed_state = True
        ai_system.update(1.0)
        assert ai.state is AIState.CONFUSED
        assert ai.confusion_level == 100
        assert ai.confusion_timer == 30.0

        receiver.jammed_state = False
        ai_system.update(10.0)
        ai_system.update(10.0)
        assert ai.state is AIState.CONFUSED
        ai_system.update(10.0)
        assert ai.state is AIState.IDLE
        assert ai.confusion_level == 0
        assert ai.confusion_origin is None

    def test_confusion_not_refreshed_while_confused(self, store, ai_system):
        entity_id = make_entity(store)
        ai = store.get_component(entity_id, ComponentKind.AI)
        store.get_component(entity_id, ComponentKind.RF_RECEIVER).jammed_state = True

        ai_system.update(1.0)
        ai_system.update(5.0)
        assert ai.confusion_timer == pytest.approx(25.0)

    def test_disabled_entities_ignore_jamming(self, store, ai_system):
        entity_id = make_entity(store, state=AIState.DISABLED)
        store.get_component(entity_id, ComponentKind.RF_RECEIVER).jammed_state = True
        ai_system.update(1.0)
        assert store.get_component(entity_id, ComponentKind.AI).state is AIState.DISABLED

    def test_confused_drone_hovers(self, store, config, clock):
        system = AISystem(store, with_confused_behavior(config, ConfusedBehavior.HOVER), clock)
        entity_id = make_entity(store, position=(10.0, 20.0, 300.0), drone=Drone())
        store.get_component(entity_id, ComponentKind.RF_RECEIVER).jammed_state = True

        system.update(0.1)
        system.update(0.1)
        position = store.get_component(entity_id, ComponentKind.TRANSFORM).position
        assert (position.x, position.y) == (10.0, 20.0)

    def test_confused_drone_circles_onset_point(self, store, config, clock):
        system = AISystem(store, with_confused_behavior(config, ConfusedBehavior.CIRCLE), clock)
        entity_id = make_entity(store, position=(10.0, 20.0, 300.0), drone=Drone())
        store.get_component(entity_id, ComponentKind.RF_RECEIVER).jammed_state = True

        clock.set_ms(0.0)
        system.update(0.1)
        position = store.get_component(entity_id, ComponentKind.TRANSFORM).position
        assert position.x == pytest.approx(60.0)
        assert position.y == pytest.approx(20.0)

        clock.set_ms(1000.0 * math.pi / 2)
        system.update(0.1)
        assert position.x == pytest.approx(10.0)
        assert position.y == pytest.approx(70.0)

    def test_confused_drone_wanders_at_half_speed(self, store, ai_system):
        entity_id = make_entity(store, drone=Drone(speed=20.0))
        store.get_component(entity_id, ComponentKind.RF_RECEIVER).jammed_state = True
        ai_system.update(0.1)
        position = store.get_component(entity_id, ComponentKind.TRANSFORM).position
        assert position.distance_to(Position(0, 0, 0)) == pytest.approx(20.0 * 0.5 * 0.01)


class TestDroneNavigation:
    """Waypoint patrol, return to base, and power exhaustion."""

    def test_patrol_moves_toward_waypoint(self, store, ai_system):
        drone = Drone(speed=15.0, waypoints=deque([Waypoint(100.0, 0.0)]))
        entity_id = make_entity(store, state=AIState.PATROL, drone=drone)
        ai_system.update(0.1)

        transform = store.get_component(entity_id, ComponentKind.TRANSFORM)
        assert transform.position.x == pytest.approx(0.15)
        assert transform.position.y == pytest.approx(0.0)
        assert transform.rotation == pytest.approx(0.0)

    def test_patrol_heading_faces_waypoint(self, store, ai_system):
        drone = Drone(waypoints=deque([Waypoint(0.0, -100.0)]))
        entity_id = make_entity(store, state=AIState.PATROL, drone=drone)
        ai_system.update(0.1)
        assert store.get_component(entity_id, ComponentKind.TRANSFORM).rotation == pytest.approx(270.0)

    def test_route_completion_returns_to_base(self, store, ai_system):
        drone = Drone(waypoints=deque([Waypoint(100.0, 0.0)]), base_location=Waypoint(0.0, 0.0))
        entity_id = make_entity(store, position=(102.0, 0.0, 0.0), state=AIState.PATROL, drone=drone)
        ai = store.get_component(entity_id, ComponentKind.AI)

        ai_system.update(0.1)
        assert len(drone.waypoints) == 0
        assert ai.state is AIState.RETURNING
        assert drone.target == Waypoint(0.0, 0.0)

        ai_system.update(0.1)
        assert store.get_component(entity_id, ComponentKind.TRANSFORM).position.x < 102.0

    def test_arrival_at_base_goes_idle(self, store, ai_system):
        drone = Drone(base_location=Waypoint(0.0, 0.0))
        entity_id = make_entity(store, position=(3.0, 0.0, 0.0), state=AIState.RETURNING, drone=drone)
        ai_system.update(0.1)
        assert store.get_component(entity_id, ComponentKind.AI).state is AIState.IDLE

    def test_route_completion_without_return(self, store, ai_system):
        drone = Drone(waypoints=deque([Waypoint(0.0, 0.0)]), base_location=Waypoint(500.0, 500.0),
                      return_to_base_when_complete=False)
        entity_id = make_entity(store, state=AIState.PATROL, drone=drone)
        ai_system.update(0.1)
        assert store.get_component(entity_id, ComponentKind.AI).state is AIState.IDLE

    def test_empty_patrol_finishes_route(self, store, ai_system):
        entity_id = make_entity(store, state=AIState.PATROL, drone=Drone())
        ai_system.update(0.1)
        assert store.get_component(entity_id, ComponentKind.AI).state is AIState.IDLE

    def test_returning_without_base_goes_idle(self, store, ai_system):
        entity_id = make_entity(store, state=AIState.RETURNING, drone=Drone())
        ai_system.update(0.1)
        assert store.get_component(entity_id, ComponentKind.AI).state is AIState.IDLE

    def test_power_exhaustion_overrides_patrol(self, store, ai_system):
        drone = Drone(remaining_time=0.05, waypoints=deque([Waypoint(1000.0, 0.0)]))
        entity_id = make_entity(store, state=AIState.PATROL, drone=drone)
        ai_system.update(0.1)
        assert store.get_component(entity_id, ComponentKind.AI).state is AIState.DISABLED
        assert drone.remaining_time < 0

    def test_disabled_drone_stays_put(self, store, ai_system):
        drone = Drone(waypoints=deque([Waypoint(1000.0, 0.0)]))
        entity_id = make_entity(store, state=AIState.DISABLED, drone=drone)
        ai_system.update(0.1)
        assert store.get_component(entity_id, ComponentKind.TRANSFORM).position.x == 0.0

    def test_non_drone_ai_does_not_move(self, store, ai_system):
        entity_id = make_entity(store, state=AIState.PATROL)
        ai_system.update(0.1)
        position = store.get_component(entity_id, ComponentKind.TRANSFORM).position
        assert (position.x, position.y) == (0.0, 0.0)
