"""Tests for the Simulation session: start-up, stepping rules and getters."""

import numpy as np
import pytest

from capsim.economy import Global
from capsim.errors import DuplicateVersionError
from capsim.ledger import InMemoryLedgerStore
from capsim.phases import Demand, Revenue
from capsim.roles import Commodity, Industry, SocialClass, Stock
from capsim.simulation import Simulation


class TestStartUp:
    def test_start_version(self, sim):
        assert sim.version == 1
        assert sim.period == 1
        assert sim.last_phase == "accumulate"
        assert sim.next_phase == "demand"

        (stamp,) = sim.timestamps()
        assert stamp.description == "start"
        assert stamp.predecessor is None
        assert sim.store.current_version(sim.project) == 1

    def test_aggregates_and_capitals_are_set(self, sim):
        assert (sim.stk.price > 0).sum() > 0
        np.testing.assert_allclose(sim.ind.initial_capital, [2000.0, 2000.0])
        assert sim.check_invariants() == []

    def test_project_already_in_store(self):
        store = InMemoryLedgerStore()
        Simulation.init(store=store)
        with pytest.raises(DuplicateVersionError):
            Simulation.init(store=store)

    def test_phases_are_instantiated_per_leaf(self, sim):
        assert list(sim.phases) == list(sim.graph.leaf_steps)
        assert isinstance(sim.get_phase("demand"), Demand)
        assert isinstance(sim.get_phase("revenue"), Revenue)


class TestStepping:
    def test_step_runs_next_leaf(self, sim):
        assert sim.step() == "demand"
        assert sim.step() == "constrain"
        assert sim.version == 3
        assert sim.last_phase == "constrain"

        stamp = sim.timestamps()[-1]
        assert stamp.description == "constrain"
        assert stamp.super_state == "exchange"
        assert stamp.predecessor == 2

    def test_step_phase_runs_whole_super_phase(self, sim):
        assert sim.step_phase("exchange") == ["demand", "constrain", "trade"]
        assert sim.next_phase == "industries_produce"
        assert sim.version == 4

    def test_step_phase_runs_single_leaf(self, sim):
        assert sim.step_phase("demand") == ["demand"]

    def test_out_of_order_super_phase(self, sim):
        with pytest.raises(ValueError, match="Cannot run super-phase 'production'"):
            sim.step_phase("production")
        assert sim.version == 1

    def test_super_phase_after_partial_progress(self, sim):
        sim.step()
        with pytest.raises(ValueError, match="next phase is 'constrain'"):
            sim.step_phase("exchange")

    def test_out_of_order_leaf(self, sim):
        with pytest.raises(ValueError, match="Cannot run phase 'trade'"):
            sim.step_phase("trade")

    def test_unknown_phase(self, sim):
        with pytest.raises(ValueError, match="Unknown phase 'grow'"):
            sim.step_phase("grow")

    def test_period_advances_after_last_leaf(self, sim):
        for _ in range(7):
            sim.step()
        assert sim.period == 1
        assert sim.step() == "accumulate"
        assert sim.period == 2
        assert sim.next_phase == "demand"
        assert sim.timestamps()[-1].period == 1

    def test_run_completes_partial_period_first(self, sim):
        sim.step()
        sim.step()
        sim.run(1)
        # 1 start + finished period + one more period
        assert sim.version == 17
        assert sim.period == 3

    def test_run_uses_configured_periods(self):
        sim = Simulation.init(n_periods=2, logging={"default_level": "ERROR"})
        sim.run()
        assert sim.version == 17


class TestReload:
    def test_reload_discards_working_changes(self, sim):
        sim.step()
        sim.stk.quantity[:] = 0.0
        sim.reload()
        assert sim.stk.quantity.sum() > 0
        assert sim.version == 2
        assert sim.last_phase == "demand"
        assert sim.period == 1

    def test_reload_after_period_end(self, sim):
        sim.run(1)
        sim.reload()
        assert sim.last_phase == "accumulate"
        assert sim.period == 2

    def test_reload_start_version(self, sim):
        sim.reload()
        assert sim.last_phase == "accumulate"
        assert sim.next_phase == "demand"
        assert sim.period == 1


class TestComparator:
    def test_default_previous(self, sim):
        sim.run(1)
        assert sim.comparator_version() == 8

    def test_set_period_start(self, sim):
        sim.run(1)
        sim.step()
        sim.set_comparator("period_start")
        assert sim.comparator_version() == 9
        assert sim.history().mode == "period_start"

    def test_set_custom(self, sim):
        sim.run(1)
        sim.set_comparator("custom", 3)
        assert sim.comparator_version() == 3
        assert sim.history().custom == 3

    def test_custom_needs_existing_version(self, sim):
        from capsim.errors import StoreError

        with pytest.raises(ValueError, match="needs a version"):
            sim.set_comparator("custom")
        with pytest.raises(StoreError):
            sim.set_comparator("custom", 42)

    def test_unknown_mode(self, sim):
        with pytest.raises(ValueError, match="Comparator mode must be one of"):
            sim.set_comparator("yesterday")

    def test_comparator_is_never_stored(self, sim):
        sim.set_comparator("period_end")
        sim.step()
        snapshot = sim.store.read_snapshot(sim.project, 2)
        assert "comparator" not in str(snapshot)


class TestGetters:
    @pytest.mark.parametrize(
        "name, cls",
        [
            ("Commodity", Commodity),
            ("stock", Stock),
            ("INDUSTRY", Industry),
            ("SocialClass", SocialClass),
            ("social_class", SocialClass),
            ("Global", Global),
        ],
    )
    def test_get_role(self, sim, name, cls):
        assert isinstance(sim.get_role(name), cls)

    def test_get_role_unknown(self, sim):
        with pytest.raises(ValueError, match="Role 'Bank' not found"):
            sim.get_role("Bank")

    def test_get_phase_unknown(self, sim):
        with pytest.raises(KeyError, match="Phase 'grow' not found"):
            sim.get_phase("grow")

    def test_totals(self, sim):
        totals = sim.totals()
        assert totals.quantity[0] == 2500.0
