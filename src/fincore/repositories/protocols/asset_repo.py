"""Asset repository protocol."""

from typing import Protocol, Optional

from fincore.domain.models import Asset


class AssetRepository(Protocol):
    """Interface for asset data access."""

    def find_by_ticker(self, ticker: str) -> Optional[Asset]:
        """Retrieve asset by ticker (case-insensitive)."""
        ...

    def list_active(self) -> list[Asset]:
        """List all active assets ordered by ticker."""
        ...

    def count(self) -> int:
        """Count assets, active or not."""
        ...

    def upsert(self, asset: Asset) -> Asset:
        """Insert a new asset or update the existing row for its ticker."""
        ...
