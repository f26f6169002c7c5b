"""Core interfaces and abstract base classes for the echozero engine."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from echozero.core.data_structures import EntityId, Position

if TYPE_CHECKING:
    from echozero.core.entity_store import EntityStore
    from echozero.simulation.visualization import CoverageDescriptor


class IPropagationModel(ABC):
    """Interface for RF path-loss models."""

    @abstractmethod
    def calculate_path_loss(self,
                            tx_position: Position,
                            rx_position: Position,
                            frequency_mhz: float) -> float:
        """Calculate path loss between transmitter and receiver.

        Args:
            tx_position: Transmitter position (world units, metres).
            rx_position: Receiver position.
            frequency_mhz: Carrier frequency in MHz.

        Returns:
            Path loss in dB (attenuation, subtracted from transmit power).
        """
        pass


class IVisualizationSink(ABC):
    """Interface for the rendering collaborator.

    The sink owns all drawing resources. It receives coverage descriptors
    and must never mutate engine component state.
    """

    @abstractmethod
    def create_coverage(self, entity_id: EntityId, descriptor: 'CoverageDescriptor') -> None:
        """A transmitter became active and has no live descriptor."""
        pass

    @abstractmethod
    def update_coverage(self, entity_id: EntityId, descriptor: 'CoverageDescriptor') -> None:
        """The live descriptor of a transmitter changed."""
        pass

    @abstractmethod
    def remove_coverage(self, entity_id: EntityId) -> None:
        """Release everything drawn for the entity."""
        pass


class ITimeSource(ABC):
    """Clock used to derive pulse phase and time-parameterised motion."""

    @abstractmethod
    def now_ms(self) -> float:
        """Current reading in milliseconds."""
        pass

    def now(self) -> float:
        """Current reading in seconds."""
        return self.now_ms() / 1000.0

    def advance(self, delta_time: float) -> None:
        """Called once per tick with the tick's delta in seconds.

        Real-time clocks ignore it.
        """
        pass



class IDataRecorder(ABC):
    """Interface for recording simulation state after each tick."""

    @abstractmethod
    def record_tick(self, tick: int, sim_time: float, store: 'EntityStore') -> None:
        """Capture state at the end of a tick.

        Args:
            tick: Number of the tick just completed (1-based).
            sim_time: Accumulated simulated seconds.
            store: The component store, read-only for the recorder.
        """
        pass
