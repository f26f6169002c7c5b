"""Base class for per-tick systems."""

from abc import ABC
from typing import List, Tuple

from echozero.core.config import EngineConfig
from echozero.core.data_structures import ComponentKind, EntityId
from echozero.core.entity_store import EntityStore


class System(ABC):
    """Logic that runs once per tick over entities owning `required_components`."""

    required_components: Tuple[ComponentKind, ...] = ()

    def __init__(self, store: EntityStore, config: EngineConfig):
        self.store = store
        self.config = config
        self.enabled = True

    def processable_entities(self) -> List[EntityId]:
        return self.store.get_entities_with_components(*self.required_components)

    def update(self, delta_time: float) -> None:
        """Process every matching entity.

        The entity list is snapshotted up front; entities destroyed by an
        earlier entity's processing are skipped.
        """
        if not self.enabled:
            return
        for entity_id in self.processable_entities():
            if not self.store.is_alive(entity_id):
                continue
            self.process_entity(entity_id, delta_time)

    def process_entity(self, entity_id: EntityId, delta_time: float) -> None:
        pass
