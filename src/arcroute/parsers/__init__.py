"""Parsers turning instance files into a network and a service catalog."""

from .models import CARPInstance
from .carp import CARPParser

__all__ = [
    "CARPInstance",
    "CARPParser",
]
