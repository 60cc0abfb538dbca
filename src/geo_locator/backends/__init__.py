from .base import LocatorBackend
from .direct import DirectBackend
from .relay import RelayBackend

__all__ = ["LocatorBackend", "DirectBackend", "RelayBackend"]
