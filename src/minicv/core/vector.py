"""Ordered container of matrices for batch/out-parameter calling conventions."""

from .errors import IndexOutOfRange, InvalidDimensions
from .matrix import Matrix


class MatVector:
    """List of matrices with bounds-checked access."""

    def __init__(self, mats=()):
        self._items = list(mats)

    def size(self):
        return len(self._items)

    def empty(self):
        return not self._items

    def push(self, mat):
        self._items.append(mat)

    def _check(self, index):
        if not 0 <= index < len(self._items):
            raise IndexOutOfRange(f"Index {index} out of range for {len(self._items)} items")

    def get(self, index):
        self._check(index)
        return self._items[index]

    def set(self, index, mat):
        self._check(index)
        self._items[index] = mat

    def clear(self):
        self._items = []

    def resize(self, size):
        """Grow with empty matrices or truncate to ``size`` items."""
        if size < 0:
            raise InvalidDimensions(f"Invalid size {size}")
        if size < len(self._items):
            del self._items[size:]
        else:
            self._items.extend(Matrix.empty() for _ in range(size - len(self._items)))

    def to_array(self):
        return list(self._items)

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))

    def __getitem__(self, index):
        return self.get(index)

    def __repr__(self):
        return f"MatVector(size={len(self._items)})"
