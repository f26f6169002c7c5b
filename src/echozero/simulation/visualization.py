"""Coverage descriptors handed to the rendering collaborator.

The engine never draws. It decides *what* a transmitter's coverage looks like
(shape, size, heading, colour class) and tells an IVisualizationSink when a
descriptor appears, changes or goes away.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional, Tuple

from echozero.core.config import AntennaType
from echozero.core.data_structures import AntennaPattern, EntityId, RFTransmitter, Transform
from echozero.core.interfaces import IVisualizationSink
from echozero.utils.logger import get_logger

logger = get_logger(__name__)

class CoverageShape(Enum):
    SPHERE = auto()
    CONE = auto()

class SignalColorClass(Enum):
    STRONG = auto()  # >= -50 dBm
    MEDIUM = auto()  # >= -70 dBm
    WEAK = auto()    # >= -85 dBm
    TRACE = auto()

@dataclass(frozen=True)
class CoverageDescriptor:
    shape: CoverageShape
    size: float  # sphere radius or cone height
    heading: float  # degrees
    half_angle: float  # degrees, 180 for spheres
    color: SignalColorClass
    position: Tuple[float, float, float]
    transmitting: bool = True


def classify_signal_color(power_dbm: float) -> SignalColorClass:
    if power_dbm >= -50:
        return SignalColorClass.STRONG
    if power_dbm >= -70:
        return SignalColorClass.MEDIUM
    if power_dbm >= -85:
        return SignalColorClass.WEAK
    return SignalColorClass.TRACE


def build_coverage_descriptor(transmitter: RFTransmitter,
                              antenna: Optional[AntennaType],
                              transform: Transform) -> CoverageDescriptor:
    """
    Describe the coverage volume of an active transmitter.

    Omnidirectional (or unknown) antennas give a sphere with radius
    5 + (power + 100) * 0.5. Directional antennas give a cone with height
    10 + (power + 100) * 1.0 and half angle beam_width / 2, pointing along
    the antenna heading.
    """
    position = (transform.position.x, transform.position.y, transform.position.z)
    color = classify_signal_color(transmitter.power)

    if antenna is None or antenna.pattern is AntennaPattern.OMNI:
        return CoverageDescriptor(
            shape=CoverageShape.SPHERE,
            size=5 + (transmitter.power + 100) * 0.5,
            heading=transmitter.antenna_heading,
            half_angle=180.0,
            color=color,
            position=position,
            transmitting=transmitter.pulse.is_transmitting,
        )
    return CoverageDescriptor(
        shape=CoverageShape.CONE,
        size=10 + (transmitter.power + 100) * 1.0,
        heading=transmitter.antenna_heading,
        half_angle=antenna.beam_width / 2,
        color=color,
        position=position,
        transmitting=transmitter.pulse.is_transmitting,
    )


class NullVisualizationSink(IVisualizationSink):
    """Sink for headless runs."""

    def create_coverage(self, entity_id: EntityId, descriptor: CoverageDescriptor) -> None:
        pass

    def update_coverage(self, entity_id: EntityId, descriptor: CoverageDescriptor) -> None:
        pass

    def remove_coverage(self, entity_id: EntityId) -> None:
        pass


class VisualizationRegistry:
    """Book-keeping of which entities currently have a live descriptor."""

    def __init__(self, sink: Optional[IVisualizationSink] = None):
        self.sink = sink or NullVisualizationSink()
        self._live: Dict[EntityId, CoverageDescriptor] = {}

    def __contains__(self, entity_id: EntityId) -> bool:
        return entity_id in self._live

    def __len__(self) -> int:
        return len(self._live)

    def get(self, entity_id: EntityId) -> Optional[CoverageDescriptor]:
        return self._live.get(entity_id)

    def sync(self,
             entity_id: EntityId,
             transmitter: RFTransmitter,
             antenna: Optional[AntennaType],
             transform: Transform) -> None:
        """Bring the sink in line with the transmitter's activation state."""
        if not transmitter.active:
            self.release(entity_id)
            return

        descriptor = build_coverage_descriptor(transmitter, antenna, transform)
        current = self._live.get(entity_id)
        if current is None:
            self._live[entity_id] = descriptor
            self.sink.create_coverage(entity_id, descriptor)
            logger.debug(f"Created coverage for entity {entity_id}: {descriptor.shape.name} size={descriptor.size:.1f}")
        elif current != descriptor:
            self._live[entity_id] = descriptor
            self.sink.update_coverage(entity_id, descriptor)

    def release(self, entity_id: EntityId) -> None:
        if self._live.pop(entity_id, None) is not None:
            self.sink.remove_coverage(entity_id)
            logger.debug(f"Removed coverage for entity {entity_id}")

    def clear(self) -> None:
        for entity_id in list(self._live):
            self.release(entity_id)
