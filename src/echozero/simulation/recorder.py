"""Per-tick state snapshots as plain, serialisable dictionaries."""

from typing import Any, Dict, List

from echozero.core.data_structures import ComponentKind
from echozero.core.entity_store import EntityStore
from echozero.core.interfaces import IDataRecorder


class StateRecorder(IDataRecorder):
    """Keeps a snapshot of receivers, AI state and jammers every `interval` ticks."""

    def __init__(self, interval: int = 1):
        if interval < 1:
            raise ValueError(f"interval must be >= 1, got {interval}")
        self.interval = interval
        self.snapshots: List[Dict[str, Any]] = []

    def record_tick(self, tick: int, sim_time: float, store: EntityStore) -> None:
        if tick % self.interval != 0:
            return
        self.snapshots.append({
            'tick': tick,
            'time': round(sim_time, 6),
            'receivers': self._receivers(store),
            'ai': self._ai(store),
            'jammers': self._jammers(store),
        })

    @staticmethod
    def _receivers(store: EntityStore) -> Dict[int, Dict[str, Any]]:
        result = {}
        for entity_id in store.get_entities_with_components(ComponentKind.RF_RECEIVER):
            rx = store.get_component(entity_id, ComponentKind.RF_RECEIVER)
            result[entity_id] = {
                'frequency': rx.frequency,
                'jammed': rx.jammed_state,
                'strongest_dbm': rx.current_signal_strength,
                'signals': [
                    {'transmitter': s.transmitter_id, 'strength_dbm': round(s.strength, 2)}
                    for s in rx.received_signals
                ],
            }
        return result

    @staticmethod
    def _ai(store: EntityStore) -> Dict[int, Dict[str, Any]]:
        result = {}
        for entity_id in store.get_entities_with_components(ComponentKind.AI, ComponentKind.TRANSFORM):
            ai = store.get_component(entity_id, ComponentKind.AI)
            position = store.get_component(entity_id, ComponentKind.TRANSFORM).position
            entry = {
                'state': ai.state.name,
                'confusion_level': ai.confusion_level,
                'position': [round(position.x, 3), round(position.y, 3), round(position.z, 3)],
            }
            drone = store.get_component(entity_id, ComponentKind.DRONE)
            if drone is not None:
                entry['remaining_time'] = round(drone.remaining_time, 3)
                entry['waypoints_left'] = len(drone.waypoints)
            result[entity_id] = entry
        return result

    @staticmethod
    def _jammers(store: EntityStore) -> Dict[int, Dict[str, Any]]:
        result = {}
        for entity_id in store.get_entities_with_components(ComponentKind.JAMMER):
            jammer = store.get_component(entity_id, ComponentKind.JAMMER)
            result[entity_id] = {
                'type': jammer.type,
                'active': jammer.active,
                'target_frequency': jammer.target_frequency,
                'power_dbm': jammer.power_level,
                'cooldown_remaining': round(jammer.cooldown_remaining, 3),
            }
        return result
