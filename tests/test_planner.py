"""Tests for planning round setup."""

import pytest

from clusterplan.broker.metadata import BrokerMeta
from clusterplan.partition.partition_map import Partition, PartitionMap
from clusterplan.planner import plan_brokers
from clusterplan.utils.config import Config


@pytest.fixture
def partition_map():
    """Create a partition map over brokers 1-3."""
    return PartitionMap(partitions=[
        Partition("orders", 0, [1, 2]),
        Partition("orders", 1, [2, 3]),
        Partition("orders", 2, [3, 2]),
    ])


@pytest.fixture
def metadata():
    """Create registry metadata for brokers 2-4."""
    return {
        2: BrokerMeta(rack="a", storage_free=200.0),
        3: BrokerMeta(rack="b", storage_free=300.0),
        4: BrokerMeta(rack="c", storage_free=400.0),
    }


def make_config(**overrides):
    """Create a config isolated from the environment."""
    config = Config(environ={})
    for key, value in overrides.items():
        config.set(key.replace("__", "."), value)
    return config


class TestPlanBrokers:
    """Test plan_brokers."""

    def test_reconciled_plan(self, partition_map, metadata):
        """Test the plan reflects construction and reconciliation."""
        plan = plan_brokers(partition_map, [2, 3, 4], metadata, make_config())

        assert plan.status.to_dict() == {"new": 1, "missing": 0, "old_missing": 0, "replace": 1}
        assert plan.brokers[1].replace
        assert plan.brokers[0].replace
        assert plan.brokers[2].used == 3
        assert plan.brokers[4].new
        assert "Broker 1 marked for removal" in plan.messages

    def test_candidates_by_count(self, partition_map, metadata):
        """Test candidates exclude replaced brokers."""
        plan = plan_brokers(partition_map, [2, 3, 4], metadata, make_config())

        assert plan.candidates().ids() == [4, 3, 2]

    def test_candidates_by_storage(self, partition_map, metadata):
        """Test the storage ordering."""
        config = make_config(planner__selection="storage")

        plan = plan_brokers(partition_map, [2, 3, 4], metadata, config)

        assert plan.candidates().ids() == [4, 3, 2]

    def test_candidates_shuffled(self, partition_map, metadata):
        """Test the shuffle ordering is seeded from config."""
        config = make_config(planner__selection="shuffle", planner__shuffle_seed=11)

        first = plan_brokers(partition_map, [2, 3, 4, 5, 6], {}, config).candidates()
        second = plan_brokers(partition_map, [2, 3, 4, 5, 6], {}, config).candidates()

        assert first.ids() == second.ids()
        assert [b.used for b in first] == sorted(b.used for b in first)

    def test_force_rebuild(self, partition_map, metadata):
        """Test force rebuild zeroes used counts."""
        config = make_config(planner__force_rebuild=True)

        plan = plan_brokers(partition_map, [1, 2, 3], metadata, config)

        assert {b.used for b in plan.brokers.values()} == {0}

    def test_metadata_disabled(self, partition_map, metadata):
        """Test metadata is ignored when disabled."""
        config = make_config(planner__use_metadata=False)

        plan = plan_brokers(partition_map, [1, 2, 3, 5], metadata, config)

        assert plan.status.missing == 0
        assert plan.status.new == 1
        assert plan.brokers[5].locality == ""
        assert plan.brokers[2].locality == ""

    def test_unknown_selection(self, partition_map):
        """Test an unknown selection is rejected."""
        config = make_config(planner__selection="random")

        with pytest.raises(ValueError):
            plan_brokers(partition_map, [1, 2, 3], {}, config)
