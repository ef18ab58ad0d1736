from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from arcroute.models import ServiceCatalog
from arcroute.network.graph import Network


@dataclass(frozen=True)
class CARPInstance:
    """Container for parsed CARP instance data."""
    name: str
    source_file: Optional[Path]
    node_count: int
    capacity: int
    depot: int  # 0-based
    network: Network
    catalog: ServiceCatalog
    optimal_value: Optional[int] = None
    vehicles: Optional[int] = None

    @property
    def depot_id(self) -> int:
        """Depot as written in instance files (1-based)."""
        return self.depot + 1
