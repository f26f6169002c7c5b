import dataclasses
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from echozero.core.config import EngineConfig, parse_enum
from echozero.core.data_structures import (
    ComponentKind, EntityId, Position, PropagationModelType, RFReceiver,
    RFTransmitter, TeamSide, Transform, Waypoint
)
from echozero.core.entity_store import EntityStore
from echozero.simulation.factories import create_drone, create_jammer, set_drone_waypoints
from echozero.utils.config_loader import load_config
from echozero.utils.logger import get_logger

logger = get_logger(__name__)

@dataclass
class Scenario:
    """A populated entity store plus the settings needed to run it."""
    name: str
    store: EntityStore
    config: EngineConfig
    description: str = ""
    duration: float = 60.0   # seconds
    time_step: float = 0.1   # seconds per tick
    seed: Optional[int] = None
    player_jammers: List[EntityId] = field(default_factory=list)
    enemy_jammers: List[EntityId] = field(default_factory=list)
    drones: List[EntityId] = field(default_factory=list)
    player_drones: List[EntityId] = field(default_factory=list)
    enemy_drones: List[EntityId] = field(default_factory=list)
    emitters: List[EntityId] = field(default_factory=list)

def _parse_position(pos_data: Dict[str, float]) -> Position:
    return Position(x=float(pos_data.get('x', 0.0)), y=float(pos_data.get('y', 0.0)), z=float(pos_data.get('z', 0.0)))

def _parse_waypoint(point_data: Dict[str, float]) -> Waypoint:
    return Waypoint(x=float(point_data.get('x', 0.0)), y=float(point_data.get('y', 0.0)))

def _resolve_engine_config(sim_config: Dict[str, Any], base_dir: str) -> EngineConfig:
    engine_path = sim_config.get('engine_config')
    if engine_path:
        if not os.path.isabs(engine_path):
            engine_path = os.path.join(base_dir, engine_path)
        config = EngineConfig.from_file(engine_path)
    else:
        config = EngineConfig.default()

    model = sim_config.get('propagation_model')
    if model is not None:
        config = dataclasses.replace(
            config,
            propagation_model=parse_enum(PropagationModelType, model, 'simulation.propagation_model'),
        )
    return config

def build_scenario_from_dict(data: Dict[str, Any], base_dir: str = ".") -> Scenario:
    """
    Builds a Scenario from an already-parsed scenario document.

    Args:
        data: Scenario mapping with ``simulation``, ``jammers``, ``drones``
            and ``emitters`` sections.
        base_dir: Directory relative engine-config paths are resolved against.

    Returns:
        A configured Scenario object.

    Raises:
        ValueError: If an entry names an unknown type, team or enum value, or a
            jammer power outside its type's range.
    """
    sim_config = data.get('simulation', {}) or {}
    config = _resolve_engine_config(sim_config, base_dir)
    store = EntityStore()

    scenario = Scenario(
        name=sim_config.get('scenario_name', 'Unnamed Scenario'),
        description=sim_config.get('description', ''),
        store=store,
        config=config,
        duration=float(sim_config.get('duration', 60.0)),
        time_step=float(sim_config.get('time_step', 0.1)),
        seed=sim_config.get('seed'),
    )
    logger.info(f"Building scenario '{scenario.name}'")

    for jam_conf in data.get('jammers', []) or []:
        team = parse_enum(TeamSide, jam_conf.get('team', 'PLAYER'), 'jammers[].team')
        entity_id = create_jammer(
            store, config, jam_conf.get('type', 'STANDARD'),
            _parse_position(jam_conf.get('position', {})), team=team
        )
        jammer = store.get_component(entity_id, ComponentKind.JAMMER)
        transmitter = store.get_component(entity_id, ComponentKind.RF_TRANSMITTER)
        if 'target_frequency' in jam_conf:
            if jam_conf['target_frequency'] not in config.frequency_bands:
                raise ValueError(f"Jammer {entity_id}: unknown frequency band '{jam_conf['target_frequency']}'")
            jammer.target_frequency = jam_conf['target_frequency']
        if 'power' in jam_conf:
            power = float(jam_conf['power'])
            levels = config.jammer_types[jammer.type].power_levels
            if not levels.contains(power):
                raise ValueError(
                    f"Jammer {entity_id}: power {power} dBm outside {jammer.type} range [{levels.min}, {levels.max}]"
                )
            jammer.power_level = power
        transmitter.antenna_heading = float(jam_conf.get('antenna_heading', 0.0))
        jammer.active = bool(jam_conf.get('active', False))

        if team is TeamSide.ENEMY:
            scenario.enemy_jammers.append(entity_id)
        else:
            scenario.player_jammers.append(entity_id)

    for drone_conf in data.get('drones', []) or []:
        team = parse_enum(TeamSide, drone_conf.get('team', 'PLAYER'), 'drones[].team')
        base = drone_conf.get('base')
        entity_id = create_drone(
            store, config, drone_conf.get('type', 'SURVEILLANCE'),
            _parse_position(drone_conf.get('position', {})),
            base_location=_parse_waypoint(base) if base else None,
            team=team,
        )
        drone = store.get_component(entity_id, ComponentKind.DRONE)
        drone.return_to_base_when_complete = bool(drone_conf.get('return_to_base', True))
        waypoints = drone_conf.get('waypoints') or []
        if waypoints:
            set_drone_waypoints(store, entity_id, [_parse_waypoint(w) for w in waypoints])
        scenario.drones.append(entity_id)
        if team is TeamSide.ENEMY:
            scenario.enemy_drones.append(entity_id)
        else:
            scenario.player_drones.append(entity_id)

    for emitter_conf in data.get('emitters', []) or []:
        entity_id = store.create_entity()
        store.add_component(entity_id, ComponentKind.TRANSFORM,
                            Transform(position=_parse_position(emitter_conf.get('position', {}))))
        tx_conf = emitter_conf.get('transmitter')
        if tx_conf:
            store.add_component(entity_id, ComponentKind.RF_TRANSMITTER, RFTransmitter(
                frequency=tx_conf.get('frequency', 'GPS'),
                power=float(tx_conf.get('power', 30.0)),
                antenna=tx_conf.get('antenna', 'OMNI'),
                active=bool(tx_conf.get('active', True)),
                antenna_heading=float(tx_conf.get('antenna_heading', 0.0)),
            ))
        rx_conf = emitter_conf.get('receiver')
        if rx_conf:
            store.add_component(entity_id, ComponentKind.RF_RECEIVER, RFReceiver(
                frequency=rx_conf.get('frequency', 'GPS'),
                sensitivity=float(rx_conf.get('sensitivity', -95.0)),
            ))
        if not tx_conf and not rx_conf:
            logger.warning(f"Emitter entity {entity_id} has neither transmitter nor receiver")
        scenario.emitters.append(entity_id)

    logger.info(
        f"Scenario '{scenario.name}' built: {len(scenario.player_jammers)} player jammers, "
        f"{len(scenario.enemy_jammers)} enemy jammers, {len(scenario.drones)} drones, "
        f"{len(scenario.emitters)} emitters"
    )
    return scenario

def build_scenario_from_config(config_path: str) -> Scenario:
    """Builds a Scenario from a YAML scenario file."""
    data = load_config(config_path)
    return build_scenario_from_dict(data, base_dir=os.path.dirname(os.path.abspath(config_path)))
