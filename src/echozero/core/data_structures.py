from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Deque, List, Optional
import numpy as np

EntityId = int

# --- Enumerations ---

class ComponentKind(Enum):
    """Closed set of component kinds the entity store understands."""
    TRANSFORM = auto()
    RF_TRANSMITTER = auto()
    RF_RECEIVER = auto()
    JAMMER = auto()
    AI = auto()
    DRONE = auto()
    TEAM = auto()

class PropagationModelType(Enum):
    FSPL = auto()          # Free-space path loss
    TWO_RAY = auto()       # Two-ray ground reflection
    LOG_DISTANCE = auto()  # Log-distance, urban exponent

class AntennaPattern(Enum):
    OMNI = auto()
    DIRECTIONAL = auto()

class AIBehavior(Enum):
    """High-level behaviour hooks. Currently extension points only."""
    PATROL = auto()
    DEFEND = auto()
    ATTACK = auto()

class AIState(Enum):
    """Authoritative AI state machine states."""
    IDLE = auto()
    PATROL = auto()
    RETURNING = auto()
    DISABLED = auto()
    CONFUSED = auto()

class ConfusedBehavior(Enum):
    RANDOM = auto()
    CIRCLE = auto()
    HOVER = auto()

class TeamSide(Enum):
    PLAYER = auto()
    ENEMY = auto()
    NEUTRAL = auto()

# --- Basic Geometric Types ---

@dataclass
class Position:
    """3D position in world units (metres)."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def distance_to(self, other: 'Position') -> float:
        """Calculate Euclidean distance to another position."""
        return float(np.sqrt((self.x - other.x)**2 +
                             (self.y - other.y)**2 +
                             (self.z - other.z)**2))

    def planar_distance_to(self, x: float, y: float) -> float:
        """Distance in the x/y plane, ignoring altitude."""
        return float(np.sqrt((self.x - x)**2 + (self.y - y)**2))

    def copy(self) -> 'Position':
        return Position(self.x, self.y, self.z)

@dataclass
class Waypoint:
    """2D navigation point. Altitude is owned by the drone, not the route."""
    x: float = 0.0
    y: float = 0.0

@dataclass
class Scale:
    x: float = 1.0
    y: float = 1.0
    z: float = 1.0

# --- Components ---

@dataclass
class Transform:
    """Position, heading (degrees) and scale of an entity."""
    position: Position = field(default_factory=Position)
    rotation: float = 0.0
    scale: Scale = field(default_factory=Scale)

    def set_heading(self, degrees: float) -> None:
        """Set rotation, wrapped into [0, 360)."""
        self.rotation = degrees % 360.0

@dataclass
class PulseParameters:
    """On/off keying of a transmitter. Times are in milliseconds."""
    pulsing: bool = False
    on_time: float = 1000.0
    off_time: float = 1000.0
    currently_transmitting: bool = False

    @property
    def cycle_time(self) -> float:
        return self.on_time + self.off_time

    @property
    def is_transmitting(self) -> bool:
        """A non-pulsing transmitter is always eligible to transmit."""
        return not self.pulsing or self.currently_transmitting

    def update_phase(self, now_ms: float) -> bool:
        """
        Derive `currently_transmitting` from a clock reading.

        Args:
            now_ms: Current clock reading in milliseconds.

        Returns:
            True if the transmitting flag changed.
        """
        if not self.pulsing or self.cycle_time <= 0:
            return False
        transmitting = (now_ms % self.cycle_time) < self.on_time
        changed = transmitting != self.currently_transmitting
        self.currently_transmitting = transmitting
        return changed

@dataclass
class RFTransmitter:
    """RF emission properties. `frequency` and `antenna` are table keys."""
    frequency: str = "GPS"
    power: float = 30.0  # dBm
    antenna: str = "OMNI"
    active: bool = False
    antenna_heading: float = 0.0  # degrees, directional antennas only
    pulse: PulseParameters = field(default_factory=PulseParameters)

@dataclass
class ReceivedSignal:
    transmitter_id: EntityId
    frequency: str
    strength: float  # dBm

@dataclass
class RFReceiver:
    """RF reception properties plus the per-tick reception outcome."""
    frequency: str = "GPS"
    sensitivity: float = -95.0  # dBm
    received_signals: List[ReceivedSignal] = field(default_factory=list)
    current_signal_strength: Optional[float] = None
    jammed_state: bool = False

    def reset(self) -> None:
        """Clear the outcome of the previous tick."""
        self.received_signals = []
        self.current_signal_strength = None
        self.jammed_state = False

@dataclass
class Jammer:
    type: str = "STANDARD"
    power_level: float = 27.0  # dBm
    target_frequency: str = "GPS"
    active: bool = False
    cooldown_remaining: float = 0.0  # seconds
    depleted: bool = False

@dataclass
class AIController:
    """Behaviour and state machine data for AI-driven entities."""
    behavior: AIBehavior = AIBehavior.PATROL
    state: AIState = AIState.IDLE
    confusion_level: float = 0.0   # 0-100
    confusion_timer: float = 0.0   # seconds remaining in CONFUSED
    last_state_change_time: float = 0.0  # diagnostic only
    confusion_origin: Optional[Position] = None

@dataclass
class Drone:
    """Mobility and power budget of a drone-class entity."""
    type: str = "SURVEILLANCE"
    speed: float = 15.0
    altitude: float = 300.0
    remaining_time: float = 1800.0  # seconds of power left
    waypoints: Deque[Waypoint] = field(default_factory=deque)
    target: Optional[Waypoint] = None
    base_location: Optional[Waypoint] = None
    return_to_base_when_complete: bool = True

@dataclass
class Team:
    team: TeamSide = TeamSide.PLAYER
