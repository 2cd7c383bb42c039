# vector.py
"""
Plain 2D vector math used by the behaviour stages.

Vectors are immutable values: every operation returns a new Vector2D.
"""
import math
from dataclasses import dataclass

# --- Data Contracts ---
#
# class Vector2D:
#   - magnitude(self) -> float: sqrt(x^2 + y^2). 0.0 for the zero vector.
#   - normalize(self) -> Vector2D: the vector itself if its magnitude is
#     exactly 0.0, otherwise (x/m, y/m).
#   - scale(self, k: float) -> Vector2D: (x*k, y*k).
#   - Invariants: instances are never mutated.


@dataclass(frozen=True)
class Vector2D:
    """A 2D vector with value equality."""
    x: float = 0.0
    y: float = 0.0

    def magnitude(self) -> float:
        """Calculate the length of the vector."""
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalize(self) -> "Vector2D":
        """
        Divide each component by the magnitude.

        The zero vector is returned unchanged. The check is an exact
        comparison against 0.0, not an epsilon test.
        """
        m = self.magnitude()
        if m == 0.0:
            return self
        return Vector2D(self.x / m, self.y / m)

    def scale(self, k: float) -> "Vector2D":
        """Multiply each component by a constant."""
        return Vector2D(self.x * k, self.y * k)

    def as_tuple(self):
        return (self.x, self.y)

    @classmethod
    def from_pair(cls, pair, name: str = "vector") -> "Vector2D":
        """Builds a vector from a two-element config value such as [100, -50]."""
        try:
            x, y = pair
            return cls(float(x), float(y))
        except (TypeError, ValueError) as e:
            raise ValueError(f"{name} must be a pair of numbers, got {pair!r}.") from e
