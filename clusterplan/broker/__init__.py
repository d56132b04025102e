"""Broker model, reconciliation and selection orderings."""

from clusterplan.broker.brokers import (
    STUB_BROKER_ID,
    Broker,
    BrokerMap,
    BrokerNotFoundError,
)
from clusterplan.broker.metadata import (
    BrokerMeta,
    BrokerMetaMap,
    broker_meta_map_from_dict,
    incomplete_metrics,
    merge_broker_metrics,
)
from clusterplan.broker.ordering import BY_COUNT, BY_ID, BY_STORAGE, BrokerList
from clusterplan.broker.status import BrokerStatus

__all__ = [
    # Model
    "STUB_BROKER_ID",
    "Broker",
    "BrokerMap",
    "BrokerNotFoundError",
    "BrokerStatus",
    # Metadata
    "BrokerMeta",
    "BrokerMetaMap",
    "broker_meta_map_from_dict",
    "incomplete_metrics",
    "merge_broker_metrics",
    # Ordering
    "BrokerList",
    "BY_COUNT",
    "BY_ID",
    "BY_STORAGE",
]
