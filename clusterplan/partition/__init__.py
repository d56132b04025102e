"""Partition maps and partition metadata."""

from clusterplan.partition.partition_map import (
    BrokerUseStats,
    BrokerUseStatsList,
    Partition,
    PartitionMap,
    PartitionMeta,
    PartitionMetaMap,
    PartitionMetaNotFoundError,
    use_stats,
)

__all__ = [
    "Partition",
    "PartitionMap",
    "PartitionMeta",
    "PartitionMetaMap",
    "PartitionMetaNotFoundError",
    "BrokerUseStats",
    "BrokerUseStatsList",
    "use_stats",
]
