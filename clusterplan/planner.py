"""
Planning round setup.

Builds the broker model a placement run works from: a BrokerMap derived
from the current assignment and reconciled against the target broker
list and registry metadata.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from clusterplan.broker.brokers import BrokerMap
from clusterplan.broker.metadata import BrokerMetaMap
from clusterplan.broker.ordering import ORDERS, BrokerList
from clusterplan.broker.status import BrokerStatus
from clusterplan.partition.partition_map import PartitionMap
from clusterplan.utils.config import Config, get_config
from clusterplan.utils.logging import get_logger

logger = get_logger(__name__)

SELECTIONS = tuple(ORDERS) + ("shuffle",)


@dataclass
class BrokerPlan:
    """
    Broker model for one planning round.

    Attributes:
        brokers: Reconciled broker map
        status: Reconciliation counters
        messages: Reconciliation audit messages
        selection: Candidate ordering (count, storage, id or shuffle)
        seed: Seed for the shuffle ordering
    """
    brokers: BrokerMap
    status: BrokerStatus
    messages: List[str] = field(default_factory=list)
    selection: str = "count"
    seed: int = 0

    def candidates(self) -> BrokerList:
        """
        Get the brokers eligible for placement, ordered for selection.

        Returns:
            Non-replaced brokers in the configured order
        """
        candidates = self.brokers.filter(lambda b: not b.replace).list()

        if self.selection == "shuffle":
            candidates.sort_pseudo_shuffle(self.seed)
        else:
            candidates.sort_by(ORDERS[self.selection])

        return candidates


def plan_brokers(
    partition_map: PartitionMap,
    broker_ids: Iterable[int],
    metadata: Optional[BrokerMetaMap] = None,
    config: Optional[Config] = None,
) -> BrokerPlan:
    """
    Build and reconcile the broker map for a planning round.

    Args:
        partition_map: Current assignment
        broker_ids: Target broker IDs
        metadata: Registry metadata (ignored if planner.use_metadata is off)
        config: Configuration (defaults to the global config)

    Returns:
        BrokerPlan for the round

    Raises:
        ValueError: If planner.selection is not a known ordering
    """
    config = config or get_config()

    selection = str(config.get("planner.selection", "count")).lower()
    if selection not in SELECTIONS:
        raise ValueError(f"Unknown broker selection: {selection}")

    if not config.get("planner.use_metadata", True):
        metadata = {}
    metadata = metadata or {}

    force = bool(config.get("planner.force_rebuild", False))

    brokers = BrokerMap.from_partition_map(partition_map, metadata, force=force)
    status, messages = brokers.reconcile(broker_ids, metadata)

    for message in messages:
        logger.info(message)

    if status.changes():
        logger.info("Broker changes detected", **status.to_dict())
    else:
        logger.info("No broker changes detected")

    return BrokerPlan(
        brokers=brokers,
        status=status,
        messages=messages,
        selection=selection,
        seed=int(config.get("planner.shuffle_seed", 0)),
    )
