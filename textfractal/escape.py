"""Escape-time functions for Mandelbrot-family fractals."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .arithmetic import Complex, magnitude_squared

ESCAPE_RADIUS_SQUARED = 4.0


class EscapeFunction(ABC):
    """Per-point escape-time algorithm.

    Subclasses only describe one step of the recurrence in :meth:`iterate`;
    the renderer and the vectorized backend drive the loop through
    :meth:`evaluate` or by calling :meth:`iterate` directly.
    """

    name: str = ""

    @abstractmethod
    def iterate(self, z: Complex, c: Complex) -> Complex:
        """Return the next iterate of ``z`` for the point ``c``."""

    def evaluate(self, c: Complex, max_iterations: int) -> int:
        """Count iterations until ``|z|**2`` reaches 4.0, capped at ``max_iterations``.

        The orbit always starts at the origin with a count of zero.
        """

        z = Complex(0.0, 0.0)
        count = 0
        while count < max_iterations and magnitude_squared(z) < ESCAPE_RADIUS_SQUARED:
            z = self.iterate(z, c)
            count += 1
        return count

    def __call__(self, c: Complex, max_iterations: int) -> int:
        return self.evaluate(c, max_iterations)


@dataclass(frozen=True)
class Mandelbrot(EscapeFunction):
    """``z -> z**2 + c``."""

    name: str = "mandelbrot"

    def iterate(self, z: Complex, c: Complex) -> Complex:
        return z * z + c


@dataclass(frozen=True)
class BurningShip(EscapeFunction):
    """``z -> (|Re z| + i|Im z|)**2 + c``."""

    name: str = "burning-ship"

    def iterate(self, z: Complex, c: Complex) -> Complex:
        folded = z.absolute()
        return folded * folded + c


ESCAPE_FUNCTIONS: dict[str, EscapeFunction] = {
    fn.name: fn for fn in (Mandelbrot(), BurningShip())
}


def get_escape_function(name: str) -> EscapeFunction:
    key = name.strip().lower().replace("_", "-")
    try:
        return ESCAPE_FUNCTIONS[key]
    except KeyError:
        choices = ", ".join(sorted(ESCAPE_FUNCTIONS))
        raise ValueError(f"Unknown fractal '{name}'. Valid choices: {choices}.") from None
