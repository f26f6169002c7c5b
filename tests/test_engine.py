import dataclasses

import pytest

from echozero.core.clock import SimulationClock
from echozero.core.config import PulseClockSource
from echozero.core.data_structures import AIState, ComponentKind, Position
from echozero.simulation.engine import SimulationEngine
from echozero.simulation.factories import create_drone, create_jammer
from echozero.simulation.recorder import StateRecorder


@pytest.fixture
def scene(store, config):
    jammer_id = create_jammer(store, config, "STANDARD", Position(0, 0, 0))
    drone_id = create_drone(store, config, "SURVEILLANCE", Position(300, 0, 300))
    return jammer_id, drone_id


class TestTick:
    """Full pipeline in fixed order."""

    def test_jamming_confuses_drone_within_one_tick(self, store, config, clock, scene):
        jammer_id, drone_id = scene
        engine = SimulationEngine(store, config, time_source=clock)

        assert engine.activate_jammer(jammer_id) is True
        engine.tick(0.1)

        assert store.get_component(jammer_id, ComponentKind.RF_TRANSMITTER).active is True
        receiver = store.get_component(drone_id, ComponentKind.RF_RECEIVER)
        assert receiver.jammed_state is True
        assert [s.transmitter_id for s in receiver.received_signals] == [jammer_id]
        ai = store.get_component(drone_id, ComponentKind.AI)
        assert ai.state is AIState.CONFUSED
        assert ai.confusion_level == 100

    def test_jamming_stops_after_deactivation(self, store, config, clock, scene):
        jammer_id, drone_id = scene
        engine = SimulationEngine(store, config, time_source=clock)
        engine.activate_jammer(jammer_id)
        engine.tick(0.1)
        engine.deactivate_jammer(jammer_id)
        engine.tick(0.1)
        assert store.get_component(drone_id, ComponentKind.RF_RECEIVER).jammed_state is False

    def test_positions_clamped_after_movement(self, store, config, clock):
        drone_id = create_drone(store, config, "SURVEILLANCE", Position(4000, -4000, 300))
        engine = SimulationEngine(store, config, time_source=clock)
        engine.tick(0.1)
        position = store.get_component(drone_id, ComponentKind.TRANSFORM).position
        assert (position.x, position.y) == (2500, -2500)

    def test_negative_delta_rejected(self, store, config, clock):
        engine = SimulationEngine(store, config, time_source=clock)
        with pytest.raises(ValueError):
            engine.tick(-0.1)

    def test_commands_delegate(self, store, config, clock, scene):
        jammer_id, _ = scene
        engine = SimulationEngine(store, config, time_source=clock)
        assert engine.set_jammer_power(jammer_id, 33) is True
        assert engine.set_jammer_power(jammer_id, 34) is False
        assert engine.set_jammer_frequency(jammer_id, "CBAND") is True
        engine.tick(0.1)
        transmitter = store.get_component(jammer_id, ComponentKind.RF_TRANSMITTER)
        assert (transmitter.power, transmitter.frequency) == (33, "CBAND")


class TestRun:

    def test_run_counts_ticks_and_records(self, store, config, clock, scene):
        recorder = StateRecorder(interval=2)
        engine = SimulationEngine(store, config, time_source=clock, data_recorder=recorder)
        assert engine.run(duration=1.0, time_step=0.1) == 10
        assert engine.tick_count == 10
        assert engine.sim_time == pytest.approx(1.0)
        assert [snap['tick'] for snap in recorder.snapshots] == [2, 4, 6, 8, 10]

    def test_run_rejects_non_positive_step(self, store, config, clock):
        engine = SimulationEngine(store, config, time_source=clock)
        with pytest.raises(ValueError):
            engine.run(duration=1.0, time_step=0)

    def test_run_rejects_negative_duration(self, store, config, clock):
        engine = SimulationEngine(store, config, time_source=clock)
        with pytest.raises(ValueError, match="duration"):
            engine.run(duration=-1.0, time_step=0.1)
        assert engine.tick_count == 0

    def test_simulation_pulse_clock_advances_with_ticks(self, store, config):
        engine = SimulationEngine(store, dataclasses.replace(config, pulse_clock=PulseClockSource.SIMULATION))
        engine.run(duration=0.5, time_step=0.25)
        assert isinstance(engine.time_source, SimulationClock)
        assert engine.time_source.now_ms() == pytest.approx(500.0)

    def test_shutdown_releases_coverage(self, store, config, clock, sink, scene):
        jammer_id, _ = scene
        engine = SimulationEngine(store, config, time_source=clock, visualization_sink=sink)
        engine.activate_jammer(jammer_id)
        engine.tick(0.1)
        assert sink.kinds() == ['create']
        engine.shutdown()
        assert sink.kinds() == ['create', 'remove']


class TestRecorder:

    def test_snapshot_contents(self, store, config, clock, scene):
        jammer_id, drone_id = scene
        recorder = StateRecorder()
        engine = SimulationEngine(store, config, time_source=clock, data_recorder=recorder)
        engine.activate_jammer(jammer_id)
        engine.tick(0.1)

        snapshot = recorder.snapshots[0]
        assert snapshot['tick'] == 1
        assert snapshot['receivers'][drone_id]['jammed'] is True
        assert snapshot['ai'][drone_id]['state'] == 'CONFUSED'
        assert snapshot['jammers'][jammer_id]['active'] is True

    def test_interval_validated(self):
        with pytest.raises(ValueError):
            StateRecorder(interval=0)
