#!/usr/bin/env python3
"""
Demo of building the broker model for a planning round.

Broker 1 is being decommissioned and broker 4 added. Broker 4 has no
replicas yet, so it leads the candidate list.
"""

from clusterplan.broker.metadata import BrokerMeta
from clusterplan.partition.partition_map import PartitionMap, PartitionMetaMap
from clusterplan.planner import plan_brokers
from clusterplan.utils.config import get_config
from clusterplan.utils.logging import configure_from_config


def main():
    config = get_config()
    configure_from_config(config)

    partition_map = PartitionMap.from_dict({
        "version": 1,
        "partitions": [
            {"topic": "demo-topic", "partition": 0, "replicas": [1, 2]},
            {"topic": "demo-topic", "partition": 1, "replicas": [2, 3]},
            {"topic": "demo-topic", "partition": 2, "replicas": [3, 1]},
        ],
    })
    metadata = {
        1: BrokerMeta(rack="rack-a", storage_free=100e9),
        2: BrokerMeta(rack="rack-b", storage_free=120e9),
        3: BrokerMeta(rack="rack-c", storage_free=80e9),
        4: BrokerMeta(rack="rack-a", storage_free=500e9),
    }
    sizes = PartitionMetaMap.from_sizes({"demo-topic": {0: 10e9, 1: 20e9, 2: 5e9}})

    plan = plan_brokers(partition_map, [2, 3, 4], metadata, config)

    print("Status:", plan.status.to_dict())
    for message in plan.messages:
        print(" ", message)

    # Credit storage back to brokers being drained, on a copy.
    speculative = plan.brokers.copy()
    speculative.sub_storage(partition_map, sizes, lambda b: b.replace)
    print("Broker 1 free after drain: %.0f GB" % (speculative[1].storage_free / 1e9))
    print("Broker 1 free in plan:     %.0f GB" % (plan.brokers[1].storage_free / 1e9))

    print("Candidates:", plan.candidates().ids())


if __name__ == "__main__":
    main()
