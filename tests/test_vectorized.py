import numpy as np
import pytest

tf = pytest.importorskip("tensorflow")

from textfractal import PRESET_REGIONS, BurningShip, Complex, FractalRenderer, Mandelbrot
from textfractal.vectorized import escape_grid


@pytest.mark.parametrize("escape_fn", [Mandelbrot(), BurningShip()])
def test_grid_matches_scalar_evaluation(escape_fn):
    real, imaginary = np.meshgrid(np.linspace(-2.0, 1.0, 13), np.linspace(-1.5, 1.5, 11))
    counts = escape_grid(escape_fn, real, imaginary, 60)
    assert counts.shape == real.shape
    assert counts.dtype == np.int32
    expected = np.array(
        [[escape_fn.evaluate(Complex(float(r), float(i)), 60) for r, i in zip(rr, ii)] for rr, ii in zip(real, imaginary)]
    )
    np.testing.assert_array_equal(counts, expected)


def test_zero_budget():
    counts = escape_grid(Mandelbrot(), np.zeros((2, 3)), np.zeros((2, 3)), 0)
    np.testing.assert_array_equal(counts, np.zeros((2, 3), dtype=np.int32))


def test_shape_mismatch():
    with pytest.raises(ValueError, match="shapes differ"):
        escape_grid(Mandelbrot(), np.zeros(3), np.zeros(4), 10)


@pytest.mark.parametrize(
    "escape_fn, preset, name",
    [(Mandelbrot(), "mandelbrot", "mandelbrot"), (BurningShip(), "burning-ship", "burning_ship")],
)
def test_tensorflow_backend_golden(escape_fn, preset, name, golden):
    renderer = FractalRenderer(escape_fn, backend="tensorflow")
    assert renderer.render(PRESET_REGIONS[preset], 200).text == golden(name)
