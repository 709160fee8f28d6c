"""Rendering of escape-time fractals onto a character grid."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, TextIO

import numpy as np

from .density import DEFAULT_MAPPER, DensityMapper, map_rows
from .escape import EscapeFunction
from .sampling import PlaneRegion, SamplingMetadata, compute_metadata, sample_point

BACKENDS = ("python", "tensorflow")


class CancelToken(Protocol):
    def is_set(self) -> bool: ...


class RenderCancelled(RuntimeError):
    """Raised between rows when the caller's cancel token is set."""


@dataclass(frozen=True)
class RenderResult:
    """Container for the iteration counts and glyph rows of a render."""

    iterations: np.ndarray
    rows: tuple[str, ...]
    metadata: SamplingMetadata

    @property
    def text(self) -> str:
        return "".join(row + "\n" for row in self.rows)


def _check_cancel(cancel: Optional[CancelToken]) -> None:
    if cancel is not None and cancel.is_set():
        raise RenderCancelled("Render cancelled by caller.")


@dataclass(frozen=True)
class FractalRenderer:
    """Sample a plane region, evaluate ``escape_fn`` and map counts to glyphs.

    ``stepping`` selects how axis values are produced (see
    :func:`textfractal.sampling.compute_metadata`), ``backend`` selects scalar
    Python evaluation or TensorFlow batch evaluation, and ``workers`` spreads
    rows of the Python backend over a thread pool.
    """

    escape_fn: EscapeFunction
    mapper: DensityMapper = DEFAULT_MAPPER
    stepping: str = "indexed"
    backend: str = "python"
    workers: int = 1
    device: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.escape_fn, EscapeFunction):
            raise ValueError(f"escape_fn must be an EscapeFunction, got {type(self.escape_fn).__name__}.")
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{self.backend}'. Valid choices: {', '.join(BACKENDS)}.")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}.")
        if self.backend == "tensorflow" and self.workers != 1:
            raise ValueError("workers only apply to the python backend; the tensorflow backend evaluates the whole grid at once.")

    def _prepare(self, region: PlaneRegion, max_iterations: int) -> SamplingMetadata:
        if max_iterations < 0:
            raise ValueError(f"max_iterations must not be negative, got {max_iterations}.")
        return compute_metadata(region, self.stepping)

    def _row_counts(self, metadata: SamplingMetadata, row: int, max_iterations: int) -> np.ndarray:
        counts = np.empty(metadata.inner.size, dtype=np.int32)
        for col in range(metadata.inner.size):
            counts[col] = self.escape_fn.evaluate(sample_point(metadata, row, col), max_iterations)
        return counts

    def _iter_counts(
        self,
        metadata: SamplingMetadata,
        max_iterations: int,
        cancel: Optional[CancelToken],
    ) -> Iterator[np.ndarray]:
        n_rows = metadata.outer.size

        if self.backend == "tensorflow":
            from .vectorized import escape_plane

            _check_cancel(cancel)
            grid = escape_plane(self.escape_fn, metadata.outer, metadata.inner, max_iterations, device=self.device)
            for row in range(n_rows):
                _check_cancel(cancel)
                yield grid[row]
            return

        if self.workers == 1:
            for row in range(n_rows):
                _check_cancel(cancel)
                yield self._row_counts(metadata, row, max_iterations)
            return

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = [
                executor.submit(self._row_counts, metadata, row, max_iterations)
                for row in range(n_rows)
            ]
            try:
                for future in futures:
                    _check_cancel(cancel)
                    yield future.result()
            finally:
                for future in futures:
                    future.cancel()

    def iter_rows(
        self,
        region: PlaneRegion,
        max_iterations: int,
        cancel: Optional[CancelToken] = None,
    ) -> Iterator[str]:
        """Yield one glyph row per outer sample, in order."""

        metadata = self._prepare(region, max_iterations)
        for counts in self._iter_counts(metadata, max_iterations, cancel):
            yield self.mapper.map_row(counts)

    def render(
        self,
        region: PlaneRegion,
        max_iterations: int,
        cancel: Optional[CancelToken] = None,
    ) -> RenderResult:
        metadata = self._prepare(region, max_iterations)
        counts = list(self._iter_counts(metadata, max_iterations, cancel))
        iterations = (
            np.stack(counts).astype(np.int32, copy=False)
            if counts
            else np.zeros(metadata.shape, dtype=np.int32)
        )
        return RenderResult(
            iterations=iterations,
            rows=map_rows(counts, self.mapper),
            metadata=metadata,
        )

    def write(
        self,
        region: PlaneRegion,
        max_iterations: int,
        stream: TextIO,
        cancel: Optional[CancelToken] = None,
    ) -> int:
        """Write each row followed by a newline; return the number of rows."""

        written = 0
        for row in self.iter_rows(region, max_iterations, cancel):
            stream.write(row + "\n")
            written += 1
        return written

    def __call__(
        self,
        x_min: float,
        x_max: float,
        y_min: float,
        y_max: float,
        rows: int,
        cols: int,
        max_iterations: int,
    ) -> str:
        region = PlaneRegion(x_min=x_min, x_max=x_max, y_min=y_min, y_max=y_max, rows=rows, cols=cols)
        return self.render(region, max_iterations).text


def render_fractal(
    escape_fn: EscapeFunction,
    x_min: float,
    x_max: float,
    y_min: float,
    y_max: float,
    rows: int,
    cols: int,
    max_iterations: int,
    *,
    mapper: Optional[DensityMapper] = None,
    stepping: str = "indexed",
) -> str:
    """Render ``escape_fn`` over the region and return the glyph text."""

    renderer = FractalRenderer(escape_fn, mapper=mapper or DEFAULT_MAPPER, stepping=stepping)
    return renderer(x_min, x_max, y_min, y_max, rows, cols, max_iterations)
