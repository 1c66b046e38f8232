"""
Named parameter map: string-keyed storage of Quantities.

Two lookup styles:
  - get()     raises MissingParameterError (required data)
  - try_get() returns None (optional data)

An absent key is different from a key present with a NaN value.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np

from wedge_layout.errors import MissingParameterError
from wedge_layout.model.quantity import Quantity

logger = logging.getLogger(__name__)


def as_quantity(value: Any) -> Quantity:
    """Wrap plain numbers and sequences into a Quantity."""
    if isinstance(value, Quantity):
        return value
    if isinstance(value, (list, tuple)):
        return Quantity.from_vector(value)
    if hasattr(value, 'shape'):
        if np.ndim(value) == 0:
            return Quantity(np.asarray(value).item())
        return Quantity.from_vector(value)
    return Quantity(value)


class ParameterMap:
    """Case-sensitive mapping of key -> Quantity with a diagnostic name.

    Args:
        name: Map name used in error messages (e.g. "PartDimensions").
        values: Optional initial content; plain numbers are wrapped.
    """

    def __init__(self, name: str, values: Optional[Dict[str, Any]] = None):
        self.name = name
        self._items: Dict[str, Quantity] = {}
        for key, value in (values or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Quantity:
        try:
            return self._items[key]
        except KeyError:
            raise MissingParameterError(self.name, key) from None

    def try_get(self, key: str) -> Optional[Quantity]:
        return self._items.get(key)

    def set(self, key: str, value: Any) -> None:
        self._items[key] = as_quantity(value)

    def contains(self, key: str) -> bool:
        return key in self._items

    def remove(self, key: str) -> bool:
        """Delete ``key``; returns False when it was not present."""
        return self._items.pop(key, None) is not None

    def keys(self) -> List[str]:
        return list(self._items.keys())

    def items(self) -> List[Tuple[str, Quantity]]:
        return list(self._items.items())

    def copy(self, name: Optional[str] = None) -> 'ParameterMap':
        """Shallow copy; Quantities are immutable so sharing them is safe."""
        clone = ParameterMap(name or self.name)
        clone._items = dict(self._items)
        return clone

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"ParameterMap({self.name!r}, {len(self)} items)"
