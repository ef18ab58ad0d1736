from .parameters import Parameters

__all__ = ["Parameters"]
