import math

import numpy as np
import pytest

from textfractal import PRESET_REGIONS, Complex, PlaneRegion, compute_metadata, sample_point
from textfractal.sampling import accumulated_axis, indexed_axis

MANDELBROT = PRESET_REGIONS["mandelbrot"]
BURNING_SHIP = PRESET_REGIONS["burning-ship"]


def test_indexed_axes_have_exact_counts():
    metadata = compute_metadata(MANDELBROT, "indexed")
    assert metadata.shape == (40, 80)
    assert metadata.outer[0] == -1.35
    assert metadata.inner[0] == -2.0
    step = (1.4 - -1.35) / 40
    assert metadata.outer[3] == -1.35 + 3 * step
    assert metadata.x_step == step


def test_accumulated_axes_can_gain_a_sample():
    assert compute_metadata(MANDELBROT, "accumulate").shape == (40, 81)
    assert compute_metadata(BURNING_SHIP, "accumulate").shape == (40, 80)


def test_accumulated_axis_stays_below_stop():
    values = accumulated_axis(-2.0, 1.05, 80)
    assert values[0] == -2.0
    assert values[-1] < 1.05
    assert np.all(np.diff(values) > 0)


def test_indexed_axis_matches_formula():
    values = indexed_axis(0.0, 1.0, 4)
    np.testing.assert_array_equal(values, [0.0, 0.25, 0.5, 0.75])


def test_sample_point_swaps_axes():
    metadata = compute_metadata(MANDELBROT)
    assert sample_point(metadata, 0, 0) == Complex(-2.0, -1.35)
    point = sample_point(metadata, 2, 5)
    assert point.real == metadata.inner[5]
    assert point.imaginary == metadata.outer[2]


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"rows": 0}, "rows"),
        ({"cols": -3}, "cols"),
        ({"x_max": math.inf}, "finite"),
        ({"y_min": math.nan}, "finite"),
    ],
)
def test_invalid_regions_are_rejected(overrides, message):
    fields = dict(x_min=-1.0, x_max=1.0, y_min=-1.0, y_max=1.0, rows=4, cols=4)
    fields.update(overrides)
    with pytest.raises(ValueError, match=message):
        PlaneRegion(**fields).validate()


def test_unknown_stepping():
    with pytest.raises(ValueError, match="Unknown stepping"):
        compute_metadata(MANDELBROT, "adaptive")


@pytest.mark.parametrize("stepping", ["indexed", "accumulate"])
def test_inverted_or_empty_ranges_have_no_samples(stepping):
    inverted = PlaneRegion(x_min=1.0, x_max=-1.0, y_min=-1.0, y_max=1.0, rows=4, cols=4)
    assert compute_metadata(inverted, stepping).shape == (0, 4)
    flat = PlaneRegion(x_min=-1.0, x_max=1.0, y_min=0.5, y_max=0.5, rows=4, cols=4)
    assert compute_metadata(flat, stepping).shape == (4, 0)


def test_accumulate_rejects_steps_below_float_resolution():
    narrow = PlaneRegion(x_min=1.0, x_max=1.0 + 1e-15, y_min=-1.0, y_max=1.0, rows=100, cols=4)
    with pytest.raises(ValueError, match="too small to advance"):
        compute_metadata(narrow, "accumulate")
    assert compute_metadata(narrow, "indexed").shape == (100, 4)
