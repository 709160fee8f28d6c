"""Sampling grids over a rectangular region of the complex plane."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .arithmetic import Complex

STEPPING_MODES = ("indexed", "accumulate")


@dataclass(frozen=True)
class PlaneRegion:
    """Sampling window and grid resolution for a single render."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float
    rows: int
    cols: int

    def validate(self) -> None:
        for label, value in (
            ("x_min", self.x_min),
            ("x_max", self.x_max),
            ("y_min", self.y_min),
            ("y_max", self.y_max),
        ):
            if not math.isfinite(value):
                raise ValueError(f"{label} must be finite, got {value!r}.")
        if self.rows <= 0:
            raise ValueError(f"rows must be positive, got {self.rows}.")
        if self.cols <= 0:
            raise ValueError(f"cols must be positive, got {self.cols}.")

    @property
    def x_step(self) -> float:
        return float(np.float64(self.x_max - self.x_min) / np.float64(self.rows))

    @property
    def y_step(self) -> float:
        return float(np.float64(self.y_max - self.y_min) / np.float64(self.cols))


@dataclass(frozen=True)
class SamplingMetadata:
    """The axis values a render actually visited.

    ``outer`` strides the x range once per output row and ``inner`` strides
    the y range once per output column.
    """

    outer: np.ndarray
    inner: np.ndarray
    x_step: float
    y_step: float
    stepping: str

    @property
    def shape(self) -> tuple[int, int]:
        return int(self.outer.size), int(self.inner.size)


def indexed_axis(start: float, stop: float, count: int) -> np.ndarray:
    """``start + i * step`` for ``i in range(count)``.

    An empty or inverted range has no samples.
    """

    if start >= stop:
        return np.empty(0, dtype=np.float64)
    step = np.float64(stop - start) / np.float64(count)
    return np.float64(start) + np.arange(count, dtype=np.float64) * step


def accumulated_axis(start: float, stop: float, count: int) -> np.ndarray:
    """Repeatedly add the step while below ``stop``.

    Rounding in the running sum can produce one sample more than ``count``.
    An empty or inverted range has no samples.
    """

    step = float(np.float64(stop - start) / np.float64(count))
    values = []
    value = float(start)
    while value < stop:
        values.append(value)
        following = value + step
        if following == value:
            raise ValueError(
                f"Step {step!r} is too small to advance past {value!r}; "
                "use fewer samples or indexed stepping."
            )
        value = following
    return np.array(values, dtype=np.float64)


def compute_metadata(region: PlaneRegion, stepping: str = "indexed") -> SamplingMetadata:
    if stepping == "indexed":
        axis = indexed_axis
    elif stepping == "accumulate":
        axis = accumulated_axis
    else:
        raise ValueError(f"Unknown stepping '{stepping}'. Valid choices: {', '.join(STEPPING_MODES)}.")

    region.validate()
    return SamplingMetadata(
        outer=axis(region.x_min, region.x_max, region.rows),
        inner=axis(region.y_min, region.y_max, region.cols),
        x_step=region.x_step,
        y_step=region.y_step,
        stepping=stepping,
    )


def sample_point(metadata: SamplingMetadata, row: int, col: int) -> Complex:
    # The column value is the real part and the row value the imaginary part,
    # even though rows stride the x bounds.
    return Complex(float(metadata.inner[col]), float(metadata.outer[row]))


DEFAULT_MAX_ITERATIONS = 200

PRESET_REGIONS: dict[str, PlaneRegion] = {
    "mandelbrot": PlaneRegion(x_min=-1.35, x_max=1.4, y_min=-2.0, y_max=1.05, rows=40, cols=80),
    "burning-ship": PlaneRegion(x_min=-2.0, x_max=1.2, y_min=-2.1, y_max=1.2, rows=40, cols=80),
}
