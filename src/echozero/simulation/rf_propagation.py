"""Per-tick RF propagation: pairwise signal strength and receiver aggregation."""

import math
from typing import Any, Dict, Optional, Tuple

from echozero.core.config import EngineConfig
from echozero.core.data_structures import (
    ComponentKind, EntityId, Jammer, RFReceiver, RFTransmitter, ReceivedSignal, Transform
)
from echozero.core.entity_store import EntityStore, StoreEvent
from echozero.core.interfaces import IPropagationModel, ITimeSource, IVisualizationSink
from echozero.environment.antenna import antenna_gain_db
from echozero.environment.propagation import create_propagation_model
from echozero.simulation.system import System
from echozero.simulation.visualization import VisualizationRegistry
from echozero.utils.logger import get_logger

logger = get_logger(__name__)

UNDETECTABLE = float('-inf')

class RFPropagationSystem(System):
    """
    Computes what every receiver hears each tick.

    For every active transmitter and every receiver the received strength is
    transmit power minus path loss plus antenna gain. Signals above a
    receiver's sensitivity are recorded, the strongest becomes the receiver's
    current signal strength, and any active jammer targeting the receiver's
    band sets its jammed flag.

    Pair results are memoised for the current tick only; the cache is cleared
    at the start of every update.
    """

    required_components = (ComponentKind.TRANSFORM, ComponentKind.RF_TRANSMITTER)

    def __init__(self,
                 store: EntityStore,
                 config: EngineConfig,
                 time_source: ITimeSource,
                 visualization_sink: Optional[IVisualizationSink] = None,
                 propagation_model: Optional[IPropagationModel] = None):
        super().__init__(store, config)
        self.time_source = time_source
        self.propagation_model = propagation_model or create_propagation_model(config.propagation_model)
        self.visualizations = VisualizationRegistry(visualization_sink)
        self._cache: Dict[Tuple[EntityId, EntityId], float] = {}

        store.add_listener(StoreEvent.COMPONENT_ADDED, self._on_component_added)
        store.add_listener(StoreEvent.COMPONENT_REMOVED, self._on_component_removed)
        store.add_listener(StoreEvent.ENTITY_DESTROYED, self._on_entity_destroyed)
        logger.info(f"RF propagation initialised with {type(self.propagation_model).__name__}")

    def detach(self) -> None:
        """Stop listening to the store and release every live descriptor."""
        self.store.remove_listener(StoreEvent.COMPONENT_ADDED, self._on_component_added)
        self.store.remove_listener(StoreEvent.COMPONENT_REMOVED, self._on_component_removed)
        self.store.remove_listener(StoreEvent.ENTITY_DESTROYED, self._on_entity_destroyed)
        self.visualizations.clear()
        self._cache.clear()

    # --- Pairwise computation ---

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def signal_strength(self, transmitter_id: EntityId, receiver_id: EntityId) -> float:
        """
        Strength in dBm at which the receiver perceives the transmitter.

        Returns:
            The received strength, or -inf when the transmitter is inactive,
            on another band, in the off phase of a pulse, or the pair cannot
            be evaluated.
        """
        key = (transmitter_id, receiver_id)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        tx_rf = self.store.get_component(transmitter_id, ComponentKind.RF_TRANSMITTER)
        tx_transform = self.store.get_component(transmitter_id, ComponentKind.TRANSFORM)
        rx_rf = self.store.get_component(receiver_id, ComponentKind.RF_RECEIVER)
        rx_transform = self.store.get_component(receiver_id, ComponentKind.TRANSFORM)

        if tx_rf is None or tx_transform is None or rx_rf is None or rx_transform is None:
            logger.debug(f"Pair {transmitter_id}->{receiver_id} lacks RF components; treating as undetectable")
            strength = UNDETECTABLE
        else:
            try:
                strength = self._compute_strength(tx_rf, tx_transform, rx_rf, rx_transform)
            except (ArithmeticError, KeyError, ValueError) as exc:
                logger.warning(f"Signal calculation failed for pair {transmitter_id}->{receiver_id}: {exc!r}")
                strength = UNDETECTABLE

        self._cache[key] = strength
        return strength

    def _compute_strength(self,
                          tx_rf: RFTransmitter,
                          tx_transform: Transform,
                          rx_rf: RFReceiver,
                          rx_transform: Transform) -> float:
        if not tx_rf.active or tx_rf.frequency != rx_rf.frequency:
            return UNDETECTABLE
        if not tx_rf.pulse.is_transmitting:
            return UNDETECTABLE

        tx_position = tx_transform.position
        rx_position = rx_transform.position
        if tx_position.distance_to(rx_position) == 0:
            # Co-located: no path loss, and no bearing to weight the antenna with
            return tx_rf.power

        frequency_mhz = self.config.frequency_mhz(tx_rf.frequency)
        path_loss = self.propagation_model.calculate_path_loss(tx_position, rx_position, frequency_mhz)
        strength = tx_rf.power - path_loss
        strength += antenna_gain_db(
            self.config.antenna(tx_rf.antenna), tx_rf.antenna_heading, tx_position, rx_position
        )
        if math.isnan(strength):
            raise ArithmeticError("signal strength evaluated to NaN")
        return strength

    # --- Per-tick passes ---

    def refresh_pulse_phases(self) -> None:
        """Derive the on/off phase of every pulsing transmitter from the clock."""
        now_ms = self.time_source.now_ms()
        for entity_id in self.processable_entities():
            tx_rf = self.store.get_component(entity_id, ComponentKind.RF_TRANSMITTER)
            if tx_rf.pulse.update_phase(now_ms):
                logger.debug(
                    f"Transmitter {entity_id} pulse {'on' if tx_rf.pulse.currently_transmitting else 'off'}"
                )

    def update_receivers(self) -> None:
        """Rebuild every receiver's signal list, strongest signal and jammed flag."""
        self.clear_cache()

        transmitters = self.processable_entities()
        receivers = self.store.get_entities_with_components(
            ComponentKind.TRANSFORM, ComponentKind.RF_RECEIVER
        )

        for receiver_id in receivers:
            self.store.get_component(receiver_id, ComponentKind.RF_RECEIVER).reset()

        for transmitter_id in transmitters:
            if not self.store.is_alive(transmitter_id):
                continue
            tx_rf: RFTransmitter = self.store.get_component(transmitter_id, ComponentKind.RF_TRANSMITTER)
            if not tx_rf.active:
                continue
            jammer: Optional[Jammer] = self.store.get_component(transmitter_id, ComponentKind.JAMMER)

            for receiver_id in receivers:
                if not self.store.is_alive(receiver_id):
                    continue
                rx_rf: RFReceiver = self.store.get_component(receiver_id, ComponentKind.RF_RECEIVER)
                strength = self.signal_strength(transmitter_id, receiver_id)
                if strength <= rx_rf.sensitivity:
                    continue

                rx_rf.received_signals.append(ReceivedSignal(
                    transmitter_id=transmitter_id,
                    frequency=tx_rf.frequency,
                    strength=strength,
                ))
                if rx_rf.current_signal_strength is None or strength > rx_rf.current_signal_strength:
                    rx_rf.current_signal_strength = strength

                if jammer is not None and jammer.active and jammer.target_frequency == rx_rf.frequency:
                    if not rx_rf.jammed_state:
                        logger.debug(f"Receiver {receiver_id} jammed by {transmitter_id} on {rx_rf.frequency}")
                    rx_rf.jammed_state = True

    def sync_visualizations(self) -> None:
        for entity_id in self.processable_entities():
            if not self.store.is_alive(entity_id):
                continue
            self._sync_visualization(entity_id)

    def update(self, delta_time: float) -> None:
        if not self.enabled:
            return
        self.clear_cache()
        self.refresh_pulse_phases()
        self.update_receivers()
        self.sync_visualizations()

    # --- Store notifications ---

    def _sync_visualization(self, entity_id: EntityId) -> None:
        tx_rf = self.store.get_component(entity_id, ComponentKind.RF_TRANSMITTER)
        transform = self.store.get_component(entity_id, ComponentKind.TRANSFORM)
        if tx_rf is None or transform is None:
            self.visualizations.release(entity_id)
            return
        self.visualizations.sync(entity_id, tx_rf, self.config.antenna(tx_rf.antenna), transform)

    def _forget(self, entity_id: EntityId) -> None:
        self._cache = {
            key: value for key, value in self._cache.items() if entity_id not in key
        }

    def _on_component_added(self, entity_id: EntityId, kind: ComponentKind, component: Any) -> None:
        if kind is ComponentKind.RF_TRANSMITTER:
            self._sync_visualization(entity_id)

    def _on_component_removed(self, entity_id: EntityId, kind: ComponentKind, component: Any) -> None:
        if kind in (ComponentKind.RF_TRANSMITTER, ComponentKind.TRANSFORM):
            self.visualizations.release(entity_id)
        if kind in (ComponentKind.RF_TRANSMITTER, ComponentKind.RF_RECEIVER, ComponentKind.TRANSFORM):
            self._forget(entity_id)

    def _on_entity_destroyed(self, entity_id: EntityId) -> None:
        self.visualizations.release(entity_id)
        self._forget(entity_id)
