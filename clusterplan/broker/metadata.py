"""
Broker metadata fetched from the cluster registry.

Holds the per-broker attributes used to satisfy placement constraints
(rack locality and free storage) together with the registry fields
describing how to reach the broker.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from clusterplan.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BrokerMeta:
    """
    Metadata about a live broker.

    Attributes:
        rack: Rack/zone identifier ("" when unknown)
        storage_free: Free storage in bytes, from broker metrics
        metrics_incomplete: True if no storage metrics were found
        host: Broker hostname
        port: Broker port
        endpoints: Listener endpoints
        listener_security_protocol_map: Listener name -> security protocol
        jmx_port: JMX port (-1 if disabled)
        timestamp: Registration timestamp as stored by the registry
        version: Registration schema version
    """
    rack: str = ""
    storage_free: float = 0.0
    metrics_incomplete: bool = False
    host: str = ""
    port: int = 0
    endpoints: List[str] = field(default_factory=list)
    listener_security_protocol_map: Dict[str, str] = field(default_factory=dict)
    jmx_port: int = -1
    timestamp: str = ""
    version: int = 0

    def endpoint(self) -> str:
        """
        Get broker endpoint.

        Returns:
            Endpoint string (host:port)
        """
        return f"{self.host}:{self.port}"

    def to_dict(self) -> dict:
        """Convert to the registry JSON layout."""
        return {
            "listener_security_protocol_map": dict(self.listener_security_protocol_map),
            "endpoints": list(self.endpoints),
            "rack": self.rack,
            "jmx_port": self.jmx_port,
            "host": self.host,
            "timestamp": self.timestamp,
            "port": self.port,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BrokerMeta":
        """
        Create from a registry JSON payload.

        The registry stores a null rack for brokers without one, which
        maps to the empty string.
        """
        return cls(
            rack=data.get("rack") or "",
            host=data.get("host") or "",
            port=data.get("port", 0),
            endpoints=list(data.get("endpoints") or []),
            listener_security_protocol_map=dict(
                data.get("listener_security_protocol_map") or {}
            ),
            jmx_port=data.get("jmx_port", -1),
            timestamp=str(data.get("timestamp", "")),
            version=data.get("version", 0),
        )


# Broker ID -> BrokerMeta. An empty map means metadata collection is disabled.
BrokerMetaMap = Dict[int, BrokerMeta]


def broker_meta_map_from_dict(data: Dict) -> BrokerMetaMap:
    """
    Build a BrokerMetaMap from registry payloads keyed by broker ID.

    Keys may be ints or numeric strings (as found in registry paths).
    """
    return {int(broker_id): BrokerMeta.from_dict(payload) for broker_id, payload in data.items()}


def merge_broker_metrics(meta: BrokerMetaMap, metrics: Dict[int, float]) -> None:
    """
    Merge storage metrics into broker metadata in place.

    Args:
        meta: Broker metadata map
        metrics: Broker ID -> free storage in bytes
    """
    for broker_id, broker_meta in meta.items():
        if broker_id in metrics:
            broker_meta.storage_free = float(metrics[broker_id])
            broker_meta.metrics_incomplete = False
        else:
            broker_meta.metrics_incomplete = True

            logger.warning(
                "Storage metrics not found for broker",
                broker_id=broker_id,
            )


def incomplete_metrics(meta: BrokerMetaMap) -> List[int]:
    """
    Get brokers lacking storage metrics.

    Returns:
        Sorted broker IDs flagged metrics_incomplete
    """
    return sorted(
        broker_id for broker_id, broker_meta in meta.items()
        if broker_meta.metrics_incomplete
    )
