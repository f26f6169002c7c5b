"""AI behaviour state machine: confusion under jamming and drone navigation."""

import random
from typing import Callable, Dict, Optional

import numpy as np

from echozero.core.config import EngineConfig
from echozero.core.data_structures import (
    AIBehavior, AIController, AIState, ComponentKind, ConfusedBehavior, Drone,
    EntityId, RFReceiver, Transform, Waypoint
)
from echozero.core.entity_store import EntityStore
from echozero.core.interfaces import ITimeSource
from echozero.simulation.system import System
from echozero.utils.logger import get_logger

logger = get_logger(__name__)

ARRIVAL_RADIUS = 5.0
MOVEMENT_SCALE = 0.01          # speed units -> per-tick displacement
CONFUSED_SPEED_FACTOR = 0.5
RANDOM_HEADING_CHANCE = 0.05   # per tick
CONFUSION_CIRCLE_RADIUS = 50.0
FULL_CONFUSION = 100.0

DroneStateHandler = Callable[[EntityId, AIController, Drone, Transform], None]


def move_toward(transform: Transform, target: Waypoint, speed: float) -> None:
    """Turn to face the target and advance speed * 0.01 along that bearing."""
    dx = target.x - transform.position.x
    dy = target.y - transform.position.y
    angle = float(np.degrees(np.arctan2(dy, dx)))
    transform.set_heading(angle)

    step = speed * MOVEMENT_SCALE
    transform.position.x += float(np.cos(np.radians(angle))) * step
    transform.position.y += float(np.sin(np.radians(angle))) * step


class AISystem(System):
    """
    Advances the AI state machine of every entity with an AI component.

    Per entity and tick:
        1. The behaviour hook for its AIBehavior runs.
        2. A CONFUSED entity's timer counts down; on expiry it returns to IDLE.
        3. If its receiver is jammed and it is neither CONFUSED nor DISABLED it
           becomes CONFUSED at full confusion for the configured duration.
        4. Drones then move according to their state and burn power; running
           out of power forces DISABLED.
    """

    required_components = (ComponentKind.AI, ComponentKind.TRANSFORM)

    def __init__(self,
                 store: EntityStore,
                 config: EngineConfig,
                 time_source: ITimeSource,
                 rng: Optional[random.Random] = None):
        super().__init__(store, config)
        self.time_source = time_source
        self.rng = rng or random.Random()

        self._behavior_handlers: Dict[AIBehavior, Callable[[EntityId, AIController, Transform, float], None]] = {
            AIBehavior.PATROL: self.process_patrol_behavior,
            AIBehavior.DEFEND: self.process_defend_behavior,
            AIBehavior.ATTACK: self.process_attack_behavior,
        }
        self._drone_handlers: Dict[AIState, DroneStateHandler] = {
            AIState.CONFUSED: self._drone_confused,
            AIState.PATROL: self._drone_patrol,
            AIState.RETURNING: self._drone_returning,
            AIState.DISABLED: self._drone_disabled,
            AIState.IDLE: self._drone_idle,
        }

    def process_entity(self, entity_id: EntityId, delta_time: float) -> None:
        ai: AIController = self.store.get_component(entity_id, ComponentKind.AI)
        transform: Transform = self.store.get_component(entity_id, ComponentKind.TRANSFORM)

        self._behavior_handlers[ai.behavior](entity_id, ai, transform, delta_time)
        self.process_state_machine(entity_id, ai, transform, delta_time)

    def process_state_machine(self,
                              entity_id: EntityId,
                              ai: AIController,
                              transform: Transform,
                              delta_time: float) -> None:
        if ai.state is AIState.CONFUSED:
            ai.confusion_timer -= delta_time
            if ai.confusion_timer <= 0:
                ai.confusion_timer = 0.0
                ai.confusion_level = 0.0
                ai.confusion_origin = None
                self._set_state(entity_id, ai, AIState.IDLE)

        receiver: Optional[RFReceiver] = self.store.get_component(entity_id, ComponentKind.RF_RECEIVER)
        if (receiver is not None and receiver.jammed_state
                and ai.state not in (AIState.CONFUSED, AIState.DISABLED)):
            self._set_state(entity_id, ai, AIState.CONFUSED)
            ai.confusion_level = FULL_CONFUSION
            ai.confusion_timer = self.config.ai.jammed_duration
            ai.confusion_origin = transform.position.copy()

        drone: Optional[Drone] = self.store.get_component(entity_id, ComponentKind.DRONE)
        if drone is not None:
            self.process_drone_state_machine(entity_id, ai, drone, transform, delta_time)

    def process_drone_state_machine(self,
                                    entity_id: EntityId,
                                    ai: AIController,
                                    drone: Drone,
                                    transform: Transform,
                                    delta_time: float) -> None:
        self._drone_handlers[ai.state](entity_id, ai, drone, transform)

        drone.remaining_time -= delta_time
        if drone.remaining_time <= 0 and ai.state is not AIState.DISABLED:
            logger.info(f"Drone {entity_id} out of power")
            self._set_state(entity_id, ai, AIState.DISABLED)

    # --- Behaviour hooks ---

    def process_patrol_behavior(self, entity_id: EntityId, ai: AIController,
                                transform: Transform, delta_time: float) -> None:
        """Extension point. Waypoint following lives in the drone state machine."""

    def process_defend_behavior(self, entity_id: EntityId, ai: AIController,
                                transform: Transform, delta_time: float) -> None:
        """Extension point."""

    def process_attack_behavior(self, entity_id: EntityId, ai: AIController,
                                transform: Transform, delta_time: float) -> None:
        """Extension point."""

    # --- Drone states ---

    def _drone_confused(self, entity_id: EntityId, ai: AIController,
                        drone: Drone, transform: Transform) -> None:
        pattern = self.config.ai.confused_behavior
        if pattern is ConfusedBehavior.RANDOM:
            if self.rng.random() < RANDOM_HEADING_CHANCE:
                transform.set_heading(self.rng.random() * 360.0)
            step = drone.speed * CONFUSED_SPEED_FACTOR * MOVEMENT_SCALE
            heading = np.radians(transform.rotation)
            transform.position.x += float(np.cos(heading)) * step
            transform.position.y += float(np.sin(heading)) * step
        elif pattern is ConfusedBehavior.CIRCLE:
            if ai.confusion_origin is None:
                ai.confusion_origin = transform.position.copy()
            t = self.time_source.now()
            transform.position.x = ai.confusion_origin.x + CONFUSION_CIRCLE_RADIUS * float(np.cos(t))
            transform.position.y = ai.confusion_origin.y + CONFUSION_CIRCLE_RADIUS * float(np.sin(t))
            transform.set_heading(float(np.degrees(t)))
        elif pattern is ConfusedBehavior.HOVER:
            pass
        else:
            raise ValueError(f"Unhandled confused behaviour: {pattern}")

    def _drone_patrol(self, entity_id: EntityId, ai: AIController,
                      drone: Drone, transform: Transform) -> None:
        if not drone.waypoints:
            self._finish_route(entity_id, ai, drone)
            return

        waypoint = drone.waypoints[0]
        if transform.position.planar_distance_to(waypoint.x, waypoint.y) < ARRIVAL_RADIUS:
            drone.waypoints.popleft()
            logger.debug(f"Drone {entity_id} reached waypoint ({waypoint.x:.1f}, {waypoint.y:.1f})")
            if not drone.waypoints:
                self._finish_route(entity_id, ai, drone)
        else:
            move_toward(transform, waypoint, drone.speed)

    def _drone_returning(self, entity_id: EntityId, ai: AIController,
                         drone: Drone, transform: Transform) -> None:
        base = drone.base_location
        if base is None:
            self._set_state(entity_id, ai, AIState.IDLE)
            return
        if transform.position.planar_distance_to(base.x, base.y) < ARRIVAL_RADIUS:
            self._set_state(entity_id, ai, AIState.IDLE)
        else:
            move_toward(transform, base, drone.speed)

    def _drone_disabled(self, entity_id: EntityId, ai: AIController,
                        drone: Drone, transform: Transform) -> None:
        pass

    def _drone_idle(self, entity_id: EntityId, ai: AIController,
                    drone: Drone, transform: Transform) -> None:
        target = drone.target
        if target is None:
            return
        if transform.position.planar_distance_to(target.x, target.y) < ARRIVAL_RADIUS:
            drone.target = None
        else:
            move_toward(transform, target, drone.speed)

    def _finish_route(self, entity_id: EntityId, ai: AIController, drone: Drone) -> None:
        if drone.return_to_base_when_complete and drone.base_location is not None:
            drone.target = drone.base_location
            self._set_state(entity_id, ai, AIState.RETURNING)
        else:
            self._set_state(entity_id, ai, AIState.IDLE)

    def _set_state(self, entity_id: EntityId, ai: AIController, state: AIState) -> None:
        if ai.state is not state:
            logger.debug(f"Entity {entity_id}: {ai.state.name} -> {state.name}")
        ai.state = state
        ai.last_state_change_time = self.time_source.now()
