"""
Version history ledger.
"""

from constellation_store.kernel.ledger.version_ledger import VersionLedger

__all__ = ["VersionLedger"]
