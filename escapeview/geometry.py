"""
Pixel-space value types: bounds, positions and offsets.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Offset:
    """A signed displacement between two positions."""

    x: int
    y: int


@dataclass(frozen=True)
class Pos:
    """A position within a pixel grid (column x, row y)."""

    x: int
    y: int

    def __sub__(self, other):
        return Offset(self.x - other.x, self.y - other.y)

    def __add__(self, other):
        return Offset(self.x + other.x, self.y + other.y)


@dataclass(frozen=True)
class Bounds:
    """The width and height of a pixel grid."""

    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Bounds must be positive, got {self.width}x{self.height}")

    @classmethod
    def from_size(cls, size):
        """Build bounds from a (width, height) tuple."""
        width, height = size
        return cls(int(width), int(height))

    @property
    def area(self):
        return self.width * self.height

    def center(self):
        return Pos(self.width // 2, self.height // 2)
