"""Complex arithmetic used by the escape-time algorithms."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Complex:
    """An immutable complex value.

    The fields are plain IEEE doubles for the scalar renderer. The vectorized
    backend stores float64 tensors in them, so the operations below only rely
    on ``+``, ``-``, ``*`` and ``abs``.
    """

    real: float
    imaginary: float

    def absolute(self) -> Complex:
        """Componentwise absolute value (not the modulus)."""

        return Complex(abs(self.real), abs(self.imaginary))

    def magnitude_squared(self):
        return magnitude_squared(self)

    def __add__(self, other: Complex) -> Complex:
        return add(self, other)

    def __mul__(self, other: Complex) -> Complex:
        return multiply(self, other)


def add(a: Complex, b: Complex) -> Complex:
    return Complex(a.real + b.real, a.imaginary + b.imaginary)


def multiply(a: Complex, b: Complex) -> Complex:
    # Operand order matters: rendered patterns depend on it bit for bit.
    return Complex(
        a.real * b.real - a.imaginary * b.imaginary,
        a.real * b.imaginary + a.imaginary * b.real,
    )


def magnitude_squared(a: Complex):
    """Return ``real**2 + imaginary**2`` without taking the square root.

    Callers compare against a squared radius (4.0 for radius 2).
    """

    return a.real * a.real + a.imaginary * a.imaginary
