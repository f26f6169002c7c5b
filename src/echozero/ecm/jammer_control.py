"""Jammer lifecycle: activation, cooldown, pulsing, transmitter mirroring."""

from typing import Optional

from echozero.core.config import EngineConfig
from echozero.core.data_structures import ComponentKind, EntityId, Jammer, RFTransmitter
from echozero.core.entity_store import EntityStore
from echozero.core.interfaces import ITimeSource
from echozero.simulation.system import System
from echozero.utils.logger import get_logger

logger = get_logger(__name__)

PULSE_JAMMER_TYPE = "PULSE"
PULSE_ON_TIME_MS = 200.0
PULSE_OFF_TIME_MS = 800.0

class JammerController(System):
    """
    Owns every jammer's state machine (inactive -> active -> cooldown -> inactive)
    and keeps the linked transmitter in lockstep with it.

    While an entity carries a jammer, its transmitter has no authority of its
    own: every tick `active`, `frequency` and `power` are overwritten from the
    jammer, and pulsing is forced on (PULSE type) or off (every other type).

    The command methods return False on invalid input and leave state
    untouched.
    """

    required_components = (ComponentKind.JAMMER, ComponentKind.RF_TRANSMITTER)

    def __init__(self, store: EntityStore, config: EngineConfig, time_source: ITimeSource):
        super().__init__(store, config)
        self.time_source = time_source

    def process_entity(self, entity_id: EntityId, delta_time: float) -> None:
        jammer: Jammer = self.store.get_component(entity_id, ComponentKind.JAMMER)
        transmitter: RFTransmitter = self.store.get_component(entity_id, ComponentKind.RF_TRANSMITTER)

        if jammer.cooldown_remaining > 0:
            jammer.cooldown_remaining = max(0.0, jammer.cooldown_remaining - delta_time)
            if jammer.cooldown_remaining == 0:
                logger.info(f"Jammer {entity_id} cooldown complete")

        was_active = transmitter.active
        transmitter.active = jammer.active and jammer.cooldown_remaining == 0
        transmitter.frequency = jammer.target_frequency
        transmitter.power = jammer.power_level

        if was_active != transmitter.active:
            logger.info(
                f"Jammer {entity_id} ({jammer.type}) transmitter "
                f"{'activated' if transmitter.active else 'deactivated'} on {jammer.target_frequency}"
            )

        pulse = transmitter.pulse
        if jammer.type == PULSE_JAMMER_TYPE and transmitter.active:
            pulse.pulsing = True
            pulse.on_time = PULSE_ON_TIME_MS
            pulse.off_time = PULSE_OFF_TIME_MS
            pulse.update_phase(self.time_source.now_ms())
        else:
            pulse.pulsing = False

    # --- Commands ---

    def _jammer(self, entity_id: EntityId, command: str) -> Optional[Jammer]:
        jammer = self.store.get_component(entity_id, ComponentKind.JAMMER)
        if jammer is None:
            logger.warning(f"{command}: entity {entity_id} has no jammer")
        return jammer

    def activate_jammer(self, entity_id: EntityId) -> bool:
        """Turn a jammer on. Fails while cooling down or depleted."""
        jammer = self._jammer(entity_id, "activate_jammer")
        if jammer is None:
            return False
        if jammer.cooldown_remaining > 0 or jammer.depleted:
            logger.warning(
                f"Jammer {entity_id} cannot activate "
                f"(cooldown={jammer.cooldown_remaining:.1f}s, depleted={jammer.depleted})"
            )
            return False
        jammer.active = True
        logger.debug(f"Jammer {entity_id} activated")
        return True

    def deactivate_jammer(self, entity_id: EntityId) -> bool:
        """Turn a jammer off and start its type's cooldown."""
        jammer = self._jammer(entity_id, "deactivate_jammer")
        if jammer is None:
            return False
        jammer.active = False
        transmitter = self.store.get_component(entity_id, ComponentKind.RF_TRANSMITTER)
        if transmitter is not None:
            transmitter.active = False

        jammer_type = self.config.jammer_types.get(jammer.type)
        if jammer_type is None:
            logger.warning(f"Jammer {entity_id} has unknown type '{jammer.type}'; no cooldown applied")
            jammer.cooldown_remaining = 0.0
        else:
            jammer.cooldown_remaining = jammer_type.cooldown
        logger.debug(f"Jammer {entity_id} deactivated, cooldown {jammer.cooldown_remaining:.1f}s")
        return True

    def set_jammer_frequency(self, entity_id: EntityId, frequency: str) -> bool:
        jammer = self._jammer(entity_id, "set_jammer_frequency")
        if jammer is None:
            return False
        if frequency not in self.config.frequency_bands:
            logger.warning(f"Rejected unknown frequency band '{frequency}' for jammer {entity_id}")
            return False
        jammer.target_frequency = frequency
        return True

    def set_jammer_power(self, entity_id: EntityId, power: float) -> bool:
        jammer = self._jammer(entity_id, "set_jammer_power")
        if jammer is None:
            return False
        jammer_type = self.config.jammer_types.get(jammer.type)
        if jammer_type is None:
            logger.warning(f"Jammer {entity_id} has unknown type '{jammer.type}'; power unchanged")
            return False
        if not jammer_type.power_levels.contains(power):
            logger.warning(
                f"Rejected power {power} dBm for jammer {entity_id}; "
                f"{jammer.type} allows [{jammer_type.power_levels.min}, {jammer_type.power_levels.max}]"
            )
            return False
        jammer.power_level = power
        return True
