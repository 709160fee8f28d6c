"""Public API for text-mode escape-time fractal rendering."""

from .arithmetic import Complex, add, magnitude_squared, multiply
from .density import DEFAULT_BUCKETS, DEFAULT_MAPPER, DensityMapper, map_to_glyph
from .escape import (
    ESCAPE_FUNCTIONS,
    ESCAPE_RADIUS_SQUARED,
    BurningShip,
    EscapeFunction,
    Mandelbrot,
    get_escape_function,
)
from .renderer import FractalRenderer, RenderCancelled, RenderResult, render_fractal
from .sampling import (
    DEFAULT_MAX_ITERATIONS,
    PRESET_REGIONS,
    PlaneRegion,
    SamplingMetadata,
    compute_metadata,
    sample_point,
)

__all__ = [
    "BurningShip",
    "Complex",
    "DEFAULT_BUCKETS",
    "DEFAULT_MAPPER",
    "DEFAULT_MAX_ITERATIONS",
    "DensityMapper",
    "ESCAPE_FUNCTIONS",
    "ESCAPE_RADIUS_SQUARED",
    "EscapeFunction",
    "FractalRenderer",
    "Mandelbrot",
    "PRESET_REGIONS",
    "PlaneRegion",
    "RenderCancelled",
    "RenderResult",
    "SamplingMetadata",
    "add",
    "compute_metadata",
    "get_escape_function",
    "magnitude_squared",
    "map_to_glyph",
    "multiply",
    "render_fractal",
    "sample_point",
]
