import pytest
import os
import sys

# Add the src directory to the path so we can import the package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from echozero.core.clock import ManualClock
from echozero.core.config import EngineConfig
from echozero.core.data_structures import (
    ComponentKind, Position, RFReceiver, RFTransmitter, Transform
)
from echozero.core.entity_store import EntityStore
from echozero.core.interfaces import IVisualizationSink


class RecordingSink(IVisualizationSink):
    """Visualization sink that records every call it receives."""

    def __init__(self):
        self.events = []

    def create_coverage(self, entity_id, descriptor):
        self.events.append(('create', entity_id, descriptor))

    def update_coverage(self, entity_id, descriptor):
        self.events.append(('update', entity_id, descriptor))

    def remove_coverage(self, entity_id):
        self.events.append(('remove', entity_id, None))

    def kinds(self):
        return [event[0] for event in self.events]


@pytest.fixture
def config():
    """The packaged default configuration."""
    return EngineConfig.default()


@pytest.fixture
def rf_config():
    """Minimal tables: band A at 2400 MHz, band B at 915 MHz, a 0 dBi omni and a horn."""
    return EngineConfig.from_dict({
        'rf': {
            'propagation_model': 'FSPL',
            'frequency_bands': {
                'A': {'value': 2400},
                'B': {'value': 915},
            },
        },
        'antennas': {
            'types': {
                'OMNI': {'gain_dbi': 0, 'beam_width': 360},
                'HORN': {'gain_dbi': 17.5, 'beam_width': 30},
            },
        },
        'jammers': {
            'types': {
                'STANDARD': {
                    'default_antenna': 'OMNI',
                    'default_frequency': 'A',
                    'power_levels': {'min': 20, 'max': 33, 'default': 27},
                    'cooldown': 0,
                },
            },
        },
    })


@pytest.fixture
def store():
    return EntityStore()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def sink():
    return RecordingSink()


def add_transmitter(store, position, frequency='A', power=30.0, antenna='OMNI', active=True, heading=0.0):
    entity_id = store.create_entity()
    store.add_component(entity_id, ComponentKind.TRANSFORM, Transform(position=Position(*position)))
    store.add_component(entity_id, ComponentKind.RF_TRANSMITTER, RFTransmitter(
        frequency=frequency, power=power, antenna=antenna, active=active, antenna_heading=heading
    ))
    return entity_id


def add_receiver(store, position, frequency='A', sensitivity=-90.0):
    entity_id = store.create_entity()
    store.add_component(entity_id, ComponentKind.TRANSFORM, Transform(position=Position(*position)))
    store.add_component(entity_id, ComponentKind.RF_RECEIVER, RFReceiver(
        frequency=frequency, sensitivity=sensitivity
    ))
    return entity_id
