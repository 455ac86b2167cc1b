"""
Protocol exports for plugin components.
"""

__all__ = [
    "SelectorProtocol",
    "TransportProtocol",
]

from .selector import SelectorProtocol
from .transport import TransportProtocol
