"""Factory functions assembling jammer and drone entities from config tables."""

from collections import deque
from typing import Iterable, Optional, Sequence, Tuple

from echozero.core.config import EngineConfig
from echozero.core.data_structures import (
    AIBehavior, AIController, AIState, ComponentKind, Drone, EntityId, Jammer,
    Position, RFReceiver, RFTransmitter, Team, TeamSide, Transform, Waypoint
)
from echozero.core.entity_store import EntityStore
from echozero.utils.logger import get_logger

logger = get_logger(__name__)

MIN_JAMMER_SEPARATION = 50.0     # metres, in the x/y plane
DRONE_RECEIVER_FREQUENCY = "GPS"
DRONE_RECEIVER_SENSITIVITY = -95.0
EW_DRONE_TRANSMITTER_POWER = 27.0
ENEMY_DRONE_FREQUENCY = "ISM2400"
ENEMY_DRONE_POWER = 20.0
ENEMY_JAMMER_FREQUENCY = "GPS"
ENEMY_PATROL_OFFSET = 200.0


def create_jammer(store: EntityStore,
                  config: EngineConfig,
                  jammer_type: str,
                  position: Position,
                  team: TeamSide = TeamSide.PLAYER) -> EntityId:
    """
    Create an inactive jammer with its linked transmitter.

    The transmitter starts on the type's default band, power and antenna; the
    jammer controller takes it over from the first tick.

    Raises:
        ValueError: If the jammer type is not configured.
    """
    type_info = config.jammer_types.get(jammer_type)
    if type_info is None:
        raise ValueError(f"Invalid jammer type: {jammer_type}")

    entity_id = store.create_entity()
    store.add_component(entity_id, ComponentKind.TRANSFORM, Transform(position=position.copy()))
    store.add_component(entity_id, ComponentKind.JAMMER, Jammer(
        type=jammer_type,
        power_level=type_info.power_levels.default,
        target_frequency=type_info.default_frequency,
    ))
    store.add_component(entity_id, ComponentKind.RF_TRANSMITTER, RFTransmitter(
        frequency=type_info.default_frequency,
        power=type_info.power_levels.default,
        antenna=type_info.default_antenna,
    ))
    store.add_component(entity_id, ComponentKind.TEAM, Team(team))
    logger.info(
        f"Created {jammer_type} jammer (ID: {entity_id}) at position "
        f"({position.x}, {position.y}, {position.z})"
    )
    return entity_id


def create_drone(store: EntityStore,
                 config: EngineConfig,
                 drone_type: str,
                 position: Position,
                 base_location: Optional[Waypoint] = None,
                 team: TeamSide = TeamSide.PLAYER) -> EntityId:
    """
    Create a drone: GPS receiver, AI on the patrol behaviour, and for
    jammer-carrying types an omnidirectional GPS transmitter.

    Raises:
        ValueError: If the drone type is not configured.
    """
    type_info = config.drone_types.get(drone_type)
    if type_info is None:
        raise ValueError(f"Invalid drone type: {drone_type}")

    entity_id = store.create_entity()
    store.add_component(entity_id, ComponentKind.TRANSFORM, Transform(position=position.copy()))
    store.add_component(entity_id, ComponentKind.DRONE, Drone(
        type=drone_type,
        speed=type_info.speed,
        altitude=type_info.altitude,
        remaining_time=type_info.operating_time,
        base_location=base_location,
    ))
    store.add_component(entity_id, ComponentKind.RF_RECEIVER, RFReceiver(
        frequency=DRONE_RECEIVER_FREQUENCY, sensitivity=DRONE_RECEIVER_SENSITIVITY
    ))
    store.add_component(entity_id, ComponentKind.AI, AIController(behavior=AIBehavior.PATROL))
    store.add_component(entity_id, ComponentKind.TEAM, Team(team))

    if type_info.carries_jammer:
        store.add_component(entity_id, ComponentKind.RF_TRANSMITTER, RFTransmitter(
            frequency=DRONE_RECEIVER_FREQUENCY, power=EW_DRONE_TRANSMITTER_POWER, antenna="OMNI"
        ))

    logger.info(f"Created {drone_type} drone (ID: {entity_id}) for {team.name}")
    return entity_id


def create_enemy_drone(store: EntityStore,
                       config: EngineConfig,
                       drone_type: str,
                       position: Position) -> EntityId:
    """Enemy drone flying a square patrol around its spawn point, emitting on ISM2400."""
    entity_id = create_drone(store, config, drone_type, position, team=TeamSide.ENEMY)
    if not store.has_component(entity_id, ComponentKind.RF_TRANSMITTER):
        store.add_component(entity_id, ComponentKind.RF_TRANSMITTER, RFTransmitter(
            frequency=ENEMY_DRONE_FREQUENCY, power=ENEMY_DRONE_POWER, antenna="OMNI"
        ))

    offset = ENEMY_PATROL_OFFSET
    set_drone_waypoints(store, entity_id, [
        Waypoint(position.x + offset, position.y + offset),
        Waypoint(position.x - offset, position.y + offset),
        Waypoint(position.x - offset, position.y - offset),
        Waypoint(position.x + offset, position.y - offset),
        Waypoint(position.x, position.y),
    ])
    return entity_id


def create_enemy_jammer(store: EntityStore,
                        config: EngineConfig,
                        jammer_type: str,
                        position: Position) -> EntityId:
    """Enemy jammer, switched on and targeting GPS from the start."""
    entity_id = create_jammer(store, config, jammer_type, position, team=TeamSide.ENEMY)
    jammer = store.get_component(entity_id, ComponentKind.JAMMER)
    jammer.active = True
    jammer.target_frequency = ENEMY_JAMMER_FREQUENCY
    store.get_component(entity_id, ComponentKind.RF_TRANSMITTER).active = True
    return entity_id


def set_drone_waypoints(store: EntityStore,
                        entity_id: EntityId,
                        waypoints: Iterable[Waypoint]) -> bool:
    """Replace a drone's route and put it on patrol.

    Returns:
        False if the entity is not an AI-driven drone.
    """
    drone = store.get_component(entity_id, ComponentKind.DRONE)
    ai = store.get_component(entity_id, ComponentKind.AI)
    if drone is None or ai is None:
        logger.warning(f"Entity {entity_id} is not an AI drone; waypoints ignored")
        return False
    drone.waypoints = deque(waypoints)
    ai.state = AIState.PATROL
    return True


def validate_jammer_placement(store: EntityStore,
                              config: EngineConfig,
                              position: Position,
                              deployed_jammers: Sequence[EntityId]) -> Tuple[bool, str]:
    """
    Check that a jammer may be placed at `position`.

    Returns:
        (valid, reason). The position must lie within terrain bounds and at
        least MIN_JAMMER_SEPARATION from every deployed jammer.
    """
    min_x, max_x, min_y, max_y = config.terrain.bounds
    if not (min_x <= position.x <= max_x and min_y <= position.y <= max_y):
        return False, "Out of bounds"

    for jammer_id in deployed_jammers:
        transform = store.get_component(jammer_id, ComponentKind.TRANSFORM)
        if transform is None:
            continue
        if transform.position.planar_distance_to(position.x, position.y) < MIN_JAMMER_SEPARATION:
            return False, f"Too close to another jammer (minimum {MIN_JAMMER_SEPARATION:g}m required)"

    return True, ""
