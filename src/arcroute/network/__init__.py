"""Network construction and the shortest-path index built on top of it."""

from .graph import Connection, Link, Network
from .index import NetworkIndex

__all__ = [
    "Connection",
    "Link",
    "Network",
    "NetworkIndex",
]
