"""Typed configuration tables for the engine, built from YAML dictionaries."""

import os
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple

from echozero.core.data_structures import (
    AntennaPattern, ConfusedBehavior, PropagationModelType
)
from echozero.utils.config_loader import load_config
from echozero.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), 'config', 'default_config.yaml'
)

class PulseClockSource(Enum):
    """Where pulse phase is read from."""
    WALL = auto()        # Real time, independent of tick rate
    SIMULATION = auto()  # Accumulated tick delta_time

@dataclass(frozen=True)
class FrequencyBand:
    key: str
    value_mhz: float
    label: str = ""
    range_mhz: Tuple[float, float] = (0.0, 0.0)
    description: str = ""

@dataclass(frozen=True)
class AntennaType:
    key: str
    gain_dbi: float
    beam_width: float  # degrees
    pattern: AntennaPattern = AntennaPattern.DIRECTIONAL
    name: str = ""

@dataclass(frozen=True)
class PowerLevels:
    min: float
    max: float
    default: float

    def contains(self, power: float) -> bool:
        return self.min <= power <= self.max

@dataclass(frozen=True)
class JammerType:
    key: str
    cooldown: float  # seconds
    power_levels: PowerLevels
    default_antenna: str = "OMNI"
    default_frequency: str = "GPS"
    range: float = 0.0
    name: str = ""

@dataclass(frozen=True)
class DroneType:
    key: str
    speed: float
    altitude: float
    operating_time: float  # seconds
    carries_jammer: bool = False
    jamming_vulnerabilities: Tuple[str, ...] = ()
    name: str = ""

@dataclass(frozen=True)
class TerrainConfig:
    width: float = 5000.0
    height: float = 5000.0

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, max_x, min_y, max_y)"""
        return (-self.width / 2, self.width / 2, -self.height / 2, self.height / 2)

@dataclass(frozen=True)
class AIConfig:
    jammed_duration: float = 30.0  # seconds an entity stays confused
    confused_behavior: ConfusedBehavior = ConfusedBehavior.RANDOM

@dataclass
class EngineConfig:
    """Read-only configuration surface handed to every engine component."""
    frequency_bands: Dict[str, FrequencyBand] = field(default_factory=dict)
    antenna_types: Dict[str, AntennaType] = field(default_factory=dict)
    jammer_types: Dict[str, JammerType] = field(default_factory=dict)
    drone_types: Dict[str, DroneType] = field(default_factory=dict)
    propagation_model: PropagationModelType = PropagationModelType.FSPL
    terrain: TerrainConfig = field(default_factory=TerrainConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    pulse_clock: PulseClockSource = PulseClockSource.WALL

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EngineConfig':
        """
        Build a validated configuration from a nested dictionary.

        Expected top-level sections: ``rf``, ``antennas``, ``jammers``,
        ``drones``, ``terrain``. Missing sections produce empty tables or
        defaults.

        Raises:
            ValueError: If an enum value is unknown or a table entry is
                missing a required key.
        """
        rf = data.get('rf', {}) or {}
        drones = data.get('drones', {}) or {}

        bands = {
            key: _parse_band(key, entry)
            for key, entry in (rf.get('frequency_bands') or {}).items()
        }
        antennas = {
            key: _parse_antenna(key, entry)
            for key, entry in ((data.get('antennas') or {}).get('types') or {}).items()
        }
        jammers = {
            key: _parse_jammer_type(key, entry)
            for key, entry in ((data.get('jammers') or {}).get('types') or {}).items()
        }
        drone_types = {
            key: _parse_drone_type(key, entry)
            for key, entry in (drones.get('types') or {}).items()
        }

        ai_data = drones.get('ai', {}) or {}
        ai = AIConfig(
            jammed_duration=float(ai_data.get('jammed_duration', 30.0)),
            confused_behavior=parse_enum(
                ConfusedBehavior, ai_data.get('confused_behavior', 'RANDOM'),
                'drones.ai.confused_behavior'
            ),
        )

        terrain_data = data.get('terrain', {}) or {}
        terrain = TerrainConfig(
            width=float(terrain_data.get('width', 5000.0)),
            height=float(terrain_data.get('height', 5000.0)),
        )

        config = cls(
            frequency_bands=bands,
            antenna_types=antennas,
            jammer_types=jammers,
            drone_types=drone_types,
            propagation_model=parse_enum(
                PropagationModelType, rf.get('propagation_model', 'FSPL'),
                'rf.propagation_model'
            ),
            terrain=terrain,
            ai=ai,
            pulse_clock=parse_enum(
                PulseClockSource, rf.get('pulse_clock', 'WALL'), 'rf.pulse_clock'
            ),
        )
        config.validate()
        logger.debug(
            f"Built engine config: {len(bands)} bands, {len(antennas)} antennas, "
            f"{len(jammers)} jammer types, model={config.propagation_model.name}"
        )
        return config

    @classmethod
    def from_file(cls, config_path: str) -> 'EngineConfig':
        return cls.from_dict(load_config(config_path))

    @classmethod
    def default(cls) -> 'EngineConfig':
        """Configuration shipped with the package."""
        return cls.from_file(DEFAULT_CONFIG_PATH)

    def validate(self) -> None:
        """Cross-check table references. Raises ValueError on dangling keys."""
        for jammer in self.jammer_types.values():
            if self.antenna_types and jammer.default_antenna not in self.antenna_types:
                raise ValueError(
                    f"Jammer type '{jammer.key}' references unknown antenna '{jammer.default_antenna}'"
                )
            if self.frequency_bands and jammer.default_frequency not in self.frequency_bands:
                raise ValueError(
                    f"Jammer type '{jammer.key}' references unknown frequency band '{jammer.default_frequency}'"
                )
            levels = jammer.power_levels
            if not levels.min <= levels.default <= levels.max:
                raise ValueError(
                    f"Jammer type '{jammer.key}' default power {levels.default} outside [{levels.min}, {levels.max}]"
                )

    def frequency_mhz(self, band_key: str) -> float:
        return self.frequency_bands[band_key].value_mhz

    def antenna(self, antenna_key: str) -> Optional[AntennaType]:
        return self.antenna_types.get(antenna_key)


def parse_enum(enum_cls, value: Any, where: str):
    """Look up an enum member by name, case-insensitively. Raises ValueError naming `where`."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls[str(value).upper()]
    except KeyError:
        valid = ', '.join(member.name for member in enum_cls)
        raise ValueError(f"Invalid value '{value}' for {where}; expected one of: {valid}") from None

def _require(entry: Dict[str, Any], key: str, where: str) -> Any:
    if key not in entry:
        raise ValueError(f"Missing required key '{key}' in {where}")
    return entry[key]

def _parse_band(key: str, entry: Dict[str, Any]) -> FrequencyBand:
    where = f"rf.frequency_bands.{key}"
    value = float(_require(entry, 'value', where))
    if value <= 0:
        raise ValueError(f"Frequency for {where} must be positive, got {value}")
    band_range: List[float] = entry.get('range') or [value, value]
    return FrequencyBand(
        key=key,
        value_mhz=value,
        label=entry.get('label', key),
        range_mhz=(float(band_range[0]), float(band_range[-1])),
        description=entry.get('description', ''),
    )

def _parse_antenna(key: str, entry: Dict[str, Any]) -> AntennaType:
    where = f"antennas.types.{key}"
    beam_width = float(_require(entry, 'beam_width', where))
    if beam_width <= 0:
        raise ValueError(f"Beam width for {where} must be positive, got {beam_width}")
    if 'pattern' in entry:
        pattern = parse_enum(AntennaPattern, entry['pattern'], f"{where}.pattern")
    else:
        pattern = AntennaPattern.OMNI if beam_width >= 360 else AntennaPattern.DIRECTIONAL
    return AntennaType(
        key=key,
        gain_dbi=float(_require(entry, 'gain_dbi', where)),
        beam_width=beam_width,
        pattern=pattern,
        name=entry.get('name', key),
    )

def _parse_jammer_type(key: str, entry: Dict[str, Any]) -> JammerType:
    where = f"jammers.types.{key}"
    levels = _require(entry, 'power_levels', where)
    power_levels = PowerLevels(
        min=float(_require(levels, 'min', f"{where}.power_levels")),
        max=float(_require(levels, 'max', f"{where}.power_levels")),
        default=float(_require(levels, 'default', f"{where}.power_levels")),
    )
    return JammerType(
        key=key,
        cooldown=float(entry.get('cooldown', 0.0)),
        power_levels=power_levels,
        default_antenna=entry.get('default_antenna', 'OMNI'),
        default_frequency=entry.get('default_frequency', 'GPS'),
        range=float(entry.get('range', 0.0)),
        name=entry.get('name', key),
    )

def _parse_drone_type(key: str, entry: Dict[str, Any]) -> DroneType:
    where = f"drones.types.{key}"
    return DroneType(
        key=key,
        speed=float(_require(entry, 'speed', where)),
        altitude=float(entry.get('altitude', 0.0)),
        operating_time=float(_require(entry, 'operating_time', where)),
        carries_jammer=bool(entry.get('jammers', False)),
        jamming_vulnerabilities=tuple(entry.get('jamming_vulnerabilities', [])),
        name=entry.get('name', key),
    )
