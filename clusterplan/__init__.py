"""
clusterplan - broker modelling for partition placement planning.

Builds the broker view a partition placement run works from:
- Broker maps derived from an existing partition assignment
- Reconciliation against a target broker list and registry metadata
- Deterministic, fairness-aware broker selection orderings
- Storage accounting for speculative partition moves
"""

__version__ = "0.1.0"

from clusterplan.broker import Broker, BrokerList, BrokerMap, BrokerStatus
from clusterplan.planner import BrokerPlan, plan_brokers

__all__ = [
    "Broker",
    "BrokerList",
    "BrokerMap",
    "BrokerStatus",
    "BrokerPlan",
    "plan_brokers",
]
