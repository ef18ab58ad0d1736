from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import yaml

from arcroute.routing.construction import ConstructionStrategy
from arcroute.routing.local_search import NEIGHBORHOODS

DEFAULT_CONFIG = Path(__file__).parent / 'default_config.yaml'


@dataclass
class Parameters:
    """Configuration parameters for a solve run"""
    seed: Optional[int] = 0
    construction: str = 'cheapest_insertion'
    shuffle_services: bool = False
    neighborhoods: List[str] = field(default_factory=lambda: list(NEIGHBORHOODS))
    time_limit: Optional[float] = None
    max_moves: Optional[int] = None
    results_dir: str = 'results'
    solution_format: str = 'dat'
    statistics_format: str = 'txt'

    @classmethod
    def from_yaml(cls, path: Path | str = None) -> 'Parameters':
        """Load parameters from YAML file"""
        if path is None:
            path = DEFAULT_CONFIG

        with open(path) as f:
            data = yaml.safe_load(f) or {}
            return cls(**data)

    @property
    def construction_strategy(self) -> ConstructionStrategy:
        return ConstructionStrategy(self.construction)

    def __post_init__(self):
        """Validate parameters after initialization"""
        valid_strategies = [s.value for s in ConstructionStrategy]
        if self.construction not in valid_strategies:
            raise ValueError(
                f"construction must be one of {valid_strategies}. Got: {self.construction}"
            )

        if self.seed is not None and not isinstance(self.seed, int):
            raise ValueError(f"seed must be an integer or null. Got: {self.seed}")

        self.neighborhoods = list(self.neighborhoods)
        unknown = [n for n in self.neighborhoods if n not in NEIGHBORHOODS]
        if unknown:
            raise ValueError(
                f"Unknown neighborhoods {unknown}. Valid options: {list(NEIGHBORHOODS)}"
            )
        if len(set(self.neighborhoods)) != len(self.neighborhoods):
            raise ValueError(f"neighborhoods must not repeat. Got: {self.neighborhoods}")

        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError(f"time_limit must be positive or null. Got: {self.time_limit}")

        if self.max_moves is not None and (not isinstance(self.max_moves, int) or self.max_moves < 0):
            raise ValueError(
                f"max_moves must be a non-negative integer or null. Got: {self.max_moves}"
            )

        if self.solution_format not in ('dat', 'json'):
            raise ValueError(f"solution_format must be 'dat' or 'json'. Got: {self.solution_format}")

        if self.statistics_format not in ('txt', 'json'):
            raise ValueError(f"statistics_format must be 'txt' or 'json'. Got: {self.statistics_format}")
