"""Route costing, construction and local search."""

from .cost import CostEvaluator
from .construction import ConstructionStrategy, ConstructiveBuilder
from .local_search import NEIGHBORHOODS, LocalSearchEngine, SearchStats

__all__ = [
    "CostEvaluator",
    "ConstructionStrategy",
    "ConstructiveBuilder",
    "LocalSearchEngine",
    "NEIGHBORHOODS",
    "SearchStats",
]
