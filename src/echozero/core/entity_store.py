"""Entity/component storage with synchronous change notification."""

import itertools
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

from echozero.core.data_structures import (
    AIController, ComponentKind, Drone, EntityId, Jammer, RFReceiver,
    RFTransmitter, Team, Transform
)
from echozero.utils.logger import get_logger

logger = get_logger(__name__)

COMPONENT_CLASSES = {
    ComponentKind.TRANSFORM: Transform,
    ComponentKind.RF_TRANSMITTER: RFTransmitter,
    ComponentKind.RF_RECEIVER: RFReceiver,
    ComponentKind.JAMMER: Jammer,
    ComponentKind.AI: AIController,
    ComponentKind.DRONE: Drone,
    ComponentKind.TEAM: Team,
}

class StoreEvent(Enum):
    ENTITY_CREATED = auto()     # callback(entity_id)
    ENTITY_DESTROYED = auto()   # callback(entity_id)
    COMPONENT_ADDED = auto()    # callback(entity_id, kind, component)
    COMPONENT_REMOVED = auto()  # callback(entity_id, kind, component)

Listener = Callable[..., None]

class EntityStore:
    """Holds entities and their components.

    Entities are plain integer ids handed out in creation order. Queries
    return ids in creation order so per-tick passes are deterministic.
    Listeners are invoked synchronously, in registration order.
    """

    def __init__(self):
        self._id_counter = itertools.count(1)
        # Insertion order of this dict is the creation order
        self._components: Dict[EntityId, Dict[ComponentKind, Any]] = {}
        self._listeners: Dict[StoreEvent, List[Listener]] = {event: [] for event in StoreEvent}

    # --- Entities ---

    def create_entity(self) -> EntityId:
        entity_id = next(self._id_counter)
        self._components[entity_id] = {}
        logger.debug(f"Created entity {entity_id}")
        self._emit(StoreEvent.ENTITY_CREATED, entity_id)
        return entity_id

    def destroy_entity(self, entity_id: EntityId) -> bool:
        """Remove an entity and all of its components.

        Returns:
            False if the entity does not exist.
        """
        if entity_id not in self._components:
            return False
        del self._components[entity_id]
        logger.debug(f"Destroyed entity {entity_id}")
        self._emit(StoreEvent.ENTITY_DESTROYED, entity_id)
        return True

    def is_alive(self, entity_id: EntityId) -> bool:
        return entity_id in self._components

    @property
    def entities(self) -> List[EntityId]:
        return list(self._components)

    # --- Components ---

    def add_component(self, entity_id: EntityId, kind: ComponentKind, component: Any) -> Optional[Any]:
        """Attach (or replace) a component.

        Returns:
            The component, or None if the entity does not exist.

        Raises:
            TypeError: If the component instance does not match its kind.
        """
        if entity_id not in self._components:
            logger.warning(f"Cannot add {kind.name} to unknown entity {entity_id}")
            return None
        expected = COMPONENT_CLASSES[kind]
        if not isinstance(component, expected):
            raise TypeError(f"{kind.name} component must be {expected.__name__}, got {type(component).__name__}")

        self._components[entity_id][kind] = component
        self._emit(StoreEvent.COMPONENT_ADDED, entity_id, kind, component)
        return component

    def remove_component(self, entity_id: EntityId, kind: ComponentKind) -> bool:
        components = self._components.get(entity_id)
        if components is None or kind not in components:
            return False
        component = components.pop(kind)
        self._emit(StoreEvent.COMPONENT_REMOVED, entity_id, kind, component)
        return True

    def get_component(self, entity_id: EntityId, kind: ComponentKind) -> Optional[Any]:
        components = self._components.get(entity_id)
        if components is None:
            return None
        return components.get(kind)

    def has_component(self, entity_id: EntityId, kind: ComponentKind) -> bool:
        components = self._components.get(entity_id)
        return components is not None and kind in components

    def get_entities_with_components(self, *kinds: ComponentKind) -> List[EntityId]:
        """Entities owning every listed kind, in creation order."""
        if not kinds:
            return list(self._components)
        return [
            entity_id for entity_id, components in self._components.items()
            if all(kind in components for kind in kinds)
        ]

    # --- Events ---

    def add_listener(self, event: StoreEvent, callback: Listener) -> None:
        self._listeners[event].append(callback)

    def remove_listener(self, event: StoreEvent, callback: Listener) -> bool:
        try:
            self._listeners[event].remove(callback)
        except ValueError:
            return False
        return True

    def _emit(self, event: StoreEvent, *args: Any) -> None:
        for callback in list(self._listeners[event]):
            callback(*args)
