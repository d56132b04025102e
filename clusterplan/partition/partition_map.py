"""
Partition maps and partition metadata.

A partition map is the replica assignment of a set of topic partitions,
in the same JSON layout used by partition reassignment tooling:

    {"version": 1, "partitions": [
        {"topic": "orders", "partition": 0, "replicas": [1, 2, 3]}]}
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from clusterplan.utils.logging import get_logger

logger = get_logger(__name__)


class PartitionMetaNotFoundError(Exception):
    """Raised when no size metadata exists for a partition."""
    pass


@dataclass
class Partition:
    """
    A topic partition and its ordered replica set.

    Attributes:
        topic: Topic name
        partition: Partition number
        replicas: Replica broker IDs, preferred leader first
    """
    topic: str
    partition: int
    replicas: List[int] = field(default_factory=list)

    def key(self) -> Tuple[str, int]:
        """Get the (topic, partition) identity."""
        return (self.topic, self.partition)

    def leader(self) -> int:
        """Get the preferred leader (first replica), or -1 if none."""
        return self.replicas[0] if self.replicas else -1

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "topic": self.topic,
            "partition": self.partition,
            "replicas": list(self.replicas),
        }

    @staticmethod
    def from_dict(data: dict) -> "Partition":
        """Create from dictionary."""
        return Partition(
            topic=data["topic"],
            partition=data["partition"],
            replicas=list(data.get("replicas", [])),
        )


@dataclass
class PartitionMap:
    """
    Replica assignment for a set of partitions.

    Attributes:
        version: Map format version
        partitions: Partitions in map order
    """
    version: int = 1
    partitions: List[Partition] = field(default_factory=list)

    def brokers(self) -> List[int]:
        """
        Get every broker ID referenced by a replica.

        Returns:
            Sorted, de-duplicated broker IDs
        """
        return sorted({bid for p in self.partitions for bid in p.replicas})

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "version": self.version,
            "partitions": [p.to_dict() for p in self.partitions],
        }

    @staticmethod
    def from_dict(data: dict) -> "PartitionMap":
        """Create from dictionary."""
        return PartitionMap(
            version=data.get("version", 1),
            partitions=[Partition.from_dict(p) for p in data.get("partitions", [])],
        )


@dataclass
class PartitionMeta:
    """
    Metadata about a partition.

    Attributes:
        size: Partition size in bytes
    """
    size: float = 0.0


class PartitionMetaMap(Dict[Tuple[str, int], PartitionMeta]):
    """Mapping of (topic, partition) to PartitionMeta."""

    @classmethod
    def from_sizes(cls, sizes: Dict[str, Dict[int, float]]) -> "PartitionMetaMap":
        """
        Build from topic -> partition -> size in bytes.

        Args:
            sizes: Nested size mapping as reported by broker metrics
        """
        pmm = cls()
        for topic, partitions in sizes.items():
            for partition, size in partitions.items():
                pmm[(topic, int(partition))] = PartitionMeta(size=float(size))
        return pmm

    def size(self, partition: Partition) -> float:
        """
        Get the size of a partition.

        Args:
            partition: Partition to look up

        Returns:
            Size in bytes

        Raises:
            PartitionMetaNotFoundError: If the partition has no metadata
        """
        meta = self.get(partition.key())
        if meta is None:
            raise PartitionMetaNotFoundError(
                f"Partition {partition.topic}:{partition.partition} not found "
                f"in partition metadata"
            )
        return meta.size


@dataclass
class BrokerUseStats:
    """
    Counts of partition ownership for a broker.

    Attributes:
        id: Broker ID
        leader: Partitions where the broker is the preferred leader
        follower: Partitions where the broker is a follower
    """
    id: int
    leader: int = 0
    follower: int = 0


class BrokerUseStatsList(List[BrokerUseStats]):
    """List of BrokerUseStats."""

    def sort_by_id(self) -> None:
        self.sort(key=lambda s: s.id)


def use_stats(partitions: Iterable[Partition]) -> BrokerUseStatsList:
    """
    Count leader and follower replicas per broker.

    Args:
        partitions: Partitions to count (e.g. PartitionMap.partitions)

    Returns:
        Stats ordered by broker ID
    """
    stats: Dict[int, BrokerUseStats] = {}

    for partition in partitions:
        for i, bid in enumerate(partition.replicas):
            s = stats.setdefault(bid, BrokerUseStats(id=bid))
            if i == 0:
                s.leader += 1
            else:
                s.follower += 1

    result = BrokerUseStatsList(stats.values())
    result.sort_by_id()

    return result
