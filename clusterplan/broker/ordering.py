"""
Broker selection orderings.

Placement consumers pick brokers from a BrokerList after ordering it
explicitly. Orders:
- BY_COUNT: ascending used count, then ascending ID
- BY_STORAGE: descending free storage, then ascending ID
- BY_ID: ascending ID
"""

import random
from typing import Any, Callable, List

from clusterplan.utils.logging import get_logger

logger = get_logger(__name__)

SortKey = Callable[[Any], Any]


def BY_COUNT(broker) -> tuple:
    return (broker.used, broker.id)


def BY_STORAGE(broker) -> tuple:
    return (-broker.storage_free, broker.id)


def BY_ID(broker) -> int:
    return broker.id


ORDERS = {
    "count": BY_COUNT,
    "storage": BY_STORAGE,
    "id": BY_ID,
}


def shuffle_runs(brokers: List, rng: random.Random) -> None:
    """
    Shuffle each run of equal used counts in place.

    Brokers must already be sorted by used count. Brokers never move
    across a boundary where the used count changes.

    Args:
        brokers: Brokers sorted by used count
        rng: Random source to draw permutations from
    """
    start = 0
    for k in range(1, len(brokers) + 1):
        if k == len(brokers) or brokers[k].used != brokers[start].used:
            run = brokers[start:k]
            rng.shuffle(run)
            brokers[start:k] = run
            start = k


class BrokerList(list):
    """
    Ordered list of brokers.

    Holds references to the brokers of a BrokerMap, not copies. Order
    is only established by the sort methods below.
    """

    def sort_by(self, order: SortKey) -> None:
        """
        Sort in place by a total order.

        Args:
            order: Key function, e.g. BY_COUNT
        """
        self.sort(key=order)

    def sort_by_count(self) -> None:
        self.sort_by(BY_COUNT)

    def sort_by_storage(self) -> None:
        self.sort_by(BY_STORAGE)

    def sort_by_id(self) -> None:
        self.sort_by(BY_ID)

    def sort_pseudo_shuffle(self, seed: int) -> None:
        """
        Sort by used count, shuffling brokers with equal counts.

        Spreads ties between equally loaded brokers across planning runs
        while staying reproducible for a given seed. Lists of two or
        fewer brokers are only sorted.

        Args:
            seed: Seed for the permutation source
        """
        self.sort_by(BY_COUNT)

        if len(self) <= 2:
            return

        shuffle_runs(self, random.Random(seed))

        logger.debug(
            "Pseudo-shuffled broker list",
            seed=seed,
            brokers=[b.id for b in self],
        )

    def ids(self) -> List[int]:
        """Get broker IDs in list order."""
        return [b.id for b in self]
