"""Reconciliation outcome counters."""

from dataclasses import asdict, dataclass


@dataclass
class BrokerStatus:
    """
    Summary of broker changes found by a reconciliation.

    Attributes:
        new: Brokers added to the map
        missing: Target brokers without registry metadata
        old_missing: Already-retired brokers that left the registry
        replace: Brokers newly marked for replacement
    """
    new: int = 0
    missing: int = 0
    old_missing: int = 0
    replace: int = 0

    def changes(self) -> bool:
        """Check whether any broker change was recorded."""
        return any((self.new, self.missing, self.old_missing, self.replace))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)
