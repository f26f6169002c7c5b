import random
from typing import Optional

from echozero.core.clock import create_time_source
from echozero.core.config import EngineConfig
from echozero.core.data_structures import EntityId
from echozero.core.entity_store import EntityStore
from echozero.core.interfaces import IDataRecorder, ITimeSource, IVisualizationSink
from echozero.ecm.jammer_control import JammerController
from echozero.simulation.ai import AISystem
from echozero.simulation.bounds import WorldBoundsSystem
from echozero.simulation.rf_propagation import RFPropagationSystem
from echozero.utils.logger import get_logger, setup_logging


class SimulationEngine:
    """Runs the fixed-order tick over an entity store.

    Tick order:
        1. JammerController   - cooldowns, transmitter mirroring, pulse setup
        2. RFPropagationSystem - cache clear, pulse phase, receivers, coverage
        3. AISystem           - confusion and drone state machines
        4. WorldBoundsSystem  - clamp final positions
    """

    def __init__(self,
                 store: EntityStore,
                 config: EngineConfig,
                 time_source: Optional[ITimeSource] = None,
                 visualization_sink: Optional[IVisualizationSink] = None,
                 rng: Optional[random.Random] = None,
                 data_recorder: Optional[IDataRecorder] = None,
                 log_level: Optional[int] = None):
        """Initialize the engine and its systems.

        Args:
            store: Component store the systems read and mutate.
            config: Engine configuration tables.
            time_source: Clock for pulse phase. Defaults to the clock selected
                by ``config.pulse_clock``.
            visualization_sink: Rendering collaborator for coverage descriptors.
            rng: Random source for confused movement.
            data_recorder: Optional component recording state after every tick.
            log_level: When given, reconfigures root logging at this level.
        """
        if log_level is not None:
            setup_logging(level=log_level)
        self.logger = get_logger(__name__)

        self.store = store
        self.config = config
        self.time_source = time_source or create_time_source(config.pulse_clock)
        self.data_recorder = data_recorder

        self.jammers = JammerController(store, config, self.time_source)
        self.rf_propagation = RFPropagationSystem(store, config, self.time_source, visualization_sink)
        self.ai = AISystem(store, config, self.time_source, rng)
        self.bounds = WorldBoundsSystem(store, config)
        self.systems = [self.jammers, self.rf_propagation, self.ai, self.bounds]

        self.tick_count = 0
        self.sim_time = 0.0
        self.logger.info(
            f"Simulation engine initialized: model={config.propagation_model.name}, "
            f"pulse clock={type(self.time_source).__name__}, entities={len(store.entities)}"
        )

    def tick(self, delta_time: float) -> None:
        """Advance the simulation by one tick of `delta_time` seconds."""
        if delta_time < 0:
            raise ValueError(f"delta_time must be non-negative, got {delta_time}")

        self.time_source.advance(delta_time)
        for system in self.systems:
            system.update(delta_time)

        self.tick_count += 1
        self.sim_time += delta_time
        self.logger.debug(f"Tick {self.tick_count} complete at t={self.sim_time:.3f}s")

        if self.data_recorder is not None:
            self.data_recorder.record_tick(self.tick_count, self.sim_time, self.store)

    def run(self, duration: float, time_step: float) -> int:
        """Tick at a fixed step until `duration` seconds have been simulated.

        Returns:
            Number of ticks executed.
        """
        if time_step <= 0:
            raise ValueError(f"time_step must be positive, got {time_step}")
        if duration < 0:
            raise ValueError(f"duration must be non-negative, got {duration}")

        ticks = int(round(duration / time_step))
        self.logger.info(f"Running {ticks} ticks of {time_step}s ({duration}s simulated)")
        for _ in range(ticks):
            self.tick(time_step)
        self.logger.info(f"Simulation finished at t={self.sim_time:.3f}s after {self.tick_count} ticks")
        return ticks

    def shutdown(self) -> None:
        """Detach from the store and release all coverage descriptors."""
        self.rf_propagation.detach()

    # --- Command surface ---

    def activate_jammer(self, entity_id: EntityId) -> bool:
        return self.jammers.activate_jammer(entity_id)

    def deactivate_jammer(self, entity_id: EntityId) -> bool:
        return self.jammers.deactivate_jammer(entity_id)

    def set_jammer_frequency(self, entity_id: EntityId, frequency: str) -> bool:
        return self.jammers.set_jammer_frequency(entity_id, frequency)

    def set_jammer_power(self, entity_id: EntityId, power: float) -> bool:
        return self.jammers.set_jammer_power(entity_id, power)
