"""
Broker model and reconciliation.

A BrokerMap is the planner's view of every broker a plan may touch. It
is built from an existing partition map and then reconciled against the
desired broker list and live registry metadata, which marks brokers for
replacement, flags brokers missing from the registry and adds new ones.

Broker ID 0 is a reserved stub. Every map built from a partition map
holds it with replace set, and reconciliation never touches it.
"""

from dataclasses import dataclass, replace as dc_replace
from typing import Callable, Iterable, List, Optional, Set, Tuple

from clusterplan.broker.metadata import BrokerMetaMap
from clusterplan.broker.ordering import BrokerList
from clusterplan.broker.status import BrokerStatus
from clusterplan.partition.partition_map import PartitionMap, PartitionMetaNotFoundError
from clusterplan.utils.logging import get_logger

logger = get_logger(__name__)

# Reserved ID for the forced-replacement stub broker.
STUB_BROKER_ID = 0


class BrokerNotFoundError(Exception):
    """Raised when a replica references a broker absent from the broker map."""
    pass


@dataclass
class Broker:
    """
    A broker as seen by the planner.

    Attributes:
        id: Broker ID (0 is the reserved stub)
        locality: Rack/zone identifier ("" when unknown)
        used: Replica slots currently attributed to the broker
        storage_free: Free storage in bytes
        replace: Broker must not receive placements and must be drained
        missing: Broker is referenced but absent from registry metadata
        new: Broker was introduced in this planning round
    """
    id: int
    locality: str = ""
    used: int = 0
    storage_free: float = 0.0
    replace: bool = False
    missing: bool = False
    new: bool = False

    def copy(self) -> "Broker":
        """Get an independent copy of this broker."""
        return dc_replace(self)


class BrokerMap(dict):
    """
    Mapping of broker ID to Broker.

    Attributes:
        unresolved: Target broker IDs that had no registry metadata in
            the last reconciliation
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.unresolved: Set[int] = set()

    @classmethod
    def from_partition_map(
        cls,
        partition_map: PartitionMap,
        metadata: Optional[BrokerMetaMap] = None,
        force: bool = False,
    ) -> "BrokerMap":
        """
        Build a BrokerMap from the replica sets of a partition map.

        Args:
            partition_map: Existing assignment
            metadata: Registry metadata used for locality and storage
            force: Leave every used count at 0, treating existing
                brokers like new ones for a full rebuild

        Returns:
            BrokerMap including the stub broker 0
        """
        metadata = metadata or {}
        bmap = cls()

        for partition in partition_map.partitions:
            for bid in partition.replicas:
                broker = bmap.get(bid)
                if broker is None:
                    broker = bmap[bid] = Broker(id=bid)

                if not force:
                    broker.used += 1

                meta = metadata.get(bid)
                if meta is not None:
                    broker.locality = meta.rack
                    broker.storage_free = meta.storage_free

        # Replicas pinned to the stub are always replaced.
        bmap[STUB_BROKER_ID] = Broker(id=STUB_BROKER_ID, replace=True)

        logger.debug(
            "Built broker map from partition map",
            partitions=len(partition_map.partitions),
            brokers=len(bmap) - 1,
            force=force,
        )

        return bmap

    def reconcile(
        self,
        broker_ids: Iterable[int],
        metadata: Optional[BrokerMetaMap] = None,
    ) -> Tuple[BrokerStatus, List[str]]:
        """
        Reconcile the map against a target broker list.

        Passes, in order:
        1. If metadata is given, brokers absent from it are marked
           missing and for replacement.
        2. Brokers absent from the target list are marked for replacement.
        3. Target brokers not yet in the map are added as new, unless
           metadata is given and lacks them.

        Counters only record transitions, so reconciling twice with the
        same inputs reports no changes the second time.

        Args:
            broker_ids: Target broker IDs for the new plan
            metadata: Registry metadata; empty disables metadata checks

        Returns:
            Tuple of (status counters, audit messages in pass order)
        """
        metadata = metadata or {}
        status = BrokerStatus()
        messages: List[str] = []

        targets = set(broker_ids)
        targets.discard(STUB_BROKER_ID)
        existing = sorted(bid for bid in self if bid != STUB_BROKER_ID)
        previously_replaced = {bid for bid in existing if self[bid].replace}

        if metadata:
            for bid in existing:
                broker = self[bid]
                if bid in metadata or broker.missing:
                    continue

                broker.replace = True
                broker.missing = True
                broker.new = False
                messages.append(f"Previous broker {bid} missing")

                if bid in targets:
                    status.missing += 1
                elif bid in previously_replaced:
                    status.old_missing += 1
                # Otherwise it is counted as a removal below.

        for bid in existing:
            if bid in targets or bid in previously_replaced:
                continue

            self[bid].replace = True
            status.replace += 1
            messages.append(f"Broker {bid} marked for removal")

        unresolved: Set[int] = set()
        for bid in sorted(targets):
            if bid in self:
                continue

            if not metadata:
                self[bid] = Broker(id=bid, new=True)
            elif bid in metadata:
                meta = metadata[bid]
                self[bid] = Broker(
                    id=bid,
                    locality=meta.rack,
                    storage_free=meta.storage_free,
                    new=True,
                )
            else:
                unresolved.add(bid)
                if bid not in self.unresolved:
                    status.missing += 1
                    messages.append(f"Broker {bid} not found in registry")
                continue

            status.new += 1
            messages.append(f"New broker {bid}")

        self.unresolved = unresolved

        logger.info(
            "Reconciled broker map",
            brokers=len(existing),
            targets=len(targets),
            metadata=bool(metadata),
            changes=status.changes(),
            **status.to_dict(),
        )

        return status, messages

    def sub_storage(
        self,
        partition_map: PartitionMap,
        sizes,
        predicate: Callable[[Broker], bool],
    ) -> None:
        """
        Add partition sizes back to the free storage of their brokers.

        Simulates the storage recovered when partitions are moved off
        brokers matching the predicate.

        Args:
            partition_map: Partitions being moved
            sizes: Size lookup with a size(partition) method, e.g. a
                PartitionMetaMap
            predicate: Selects the brokers to credit

        Raises:
            PartitionMetaNotFoundError: If a partition size is unknown
            BrokerNotFoundError: If a replica's broker is not in the map
        """
        for partition in partition_map.partitions:
            try:
                size = sizes.size(partition)
            except PartitionMetaNotFoundError as e:
                logger.error(
                    "Partition size lookup failed",
                    topic=partition.topic,
                    partition=partition.partition,
                    error=str(e),
                )
                raise

            for bid in partition.replicas:
                broker = self.get(bid)
                if broker is None:
                    logger.error(
                        "Replica references unknown broker",
                        broker_id=bid,
                        topic=partition.topic,
                        partition=partition.partition,
                    )
                    raise BrokerNotFoundError(f"Broker {bid} not found in broker map")

                if predicate(broker):
                    broker.storage_free += size

    def filter(self, predicate: Callable[[Broker], bool]) -> "BrokerMap":
        """
        Get the brokers matching a predicate.

        The stub broker is never included. Brokers are shared with this
        map, not copied.

        Args:
            predicate: Broker predicate

        Returns:
            New BrokerMap of matching brokers
        """
        return BrokerMap(
            (bid, broker) for bid, broker in self.items()
            if bid != STUB_BROKER_ID and predicate(broker)
        )

    def list(self) -> BrokerList:
        """Get the brokers as an unordered BrokerList."""
        return BrokerList(self.values())

    def copy(self) -> "BrokerMap":
        """
        Get a deep copy of the map.

        Mutating the copy, or any broker in it, leaves this map intact.
        """
        c = BrokerMap((bid, broker.copy()) for bid, broker in self.items())
        c.unresolved = set(self.unresolved)
        return c
