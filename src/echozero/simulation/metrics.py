"""Mission-level summaries derived from component state."""

from dataclasses import dataclass
from typing import Sequence

from echozero.core.data_structures import AIState, ComponentKind, EntityId
from echozero.core.entity_store import EntityStore

NEUTRAL_DOMINANCE = 0.5


@dataclass
class AssetStatus:
    active: int
    total: int

    @property
    def ratio(self) -> float:
        return self.active / self.total if self.total > 0 else 1.0


def calculate_signal_dominance(store: EntityStore,
                               player_jammers: Sequence[EntityId],
                               enemy_jammers: Sequence[EntityId]) -> float:
    """
    Share of contested bands held by the player, in [0, 1].

    Each side scores the number of distinct bands its active jammers target.
    With no active jammers on either side the result is 0.5.
    """
    def jammed_bands(jammer_ids: Sequence[EntityId]) -> set:
        bands = set()
        for jammer_id in jammer_ids:
            jammer = store.get_component(jammer_id, ComponentKind.JAMMER)
            if jammer is not None and jammer.active:
                bands.add(jammer.target_frequency)
        return bands

    player = len(jammed_bands(player_jammers))
    enemy = len(jammed_bands(enemy_jammers))
    if player == 0 and enemy == 0:
        return NEUTRAL_DOMINANCE
    return player / (player + enemy)


def calculate_asset_status(store: EntityStore,
                           jammers: Sequence[EntityId],
                           drones: Sequence[EntityId]) -> AssetStatus:
    """Count operational assets: jammers not depleted, drones not disabled.

    Destroyed entities still count toward the total.
    """
    active = 0
    for jammer_id in jammers:
        jammer = store.get_component(jammer_id, ComponentKind.JAMMER)
        if jammer is not None and not jammer.depleted:
            active += 1
    for drone_id in drones:
        ai = store.get_component(drone_id, ComponentKind.AI)
        if ai is not None and ai.state is not AIState.DISABLED:
            active += 1
    return AssetStatus(active=active, total=len(jammers) + len(drones))
