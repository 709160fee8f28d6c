"""Map iteration counts to density glyphs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

# Tuned for a budget of 200 iterations.
DEFAULT_BUCKETS: tuple[tuple[int, str], ...] = (
    (40, " "),
    (6, "."),
    (4, "+"),
    (2, "*"),
)
DEFAULT_FLOOR = "#"


@dataclass(frozen=True)
class DensityMapper:
    """Ordered threshold buckets: the first ``count > threshold`` wins."""

    buckets: tuple[tuple[int, str], ...] = DEFAULT_BUCKETS
    floor: str = DEFAULT_FLOOR

    def __post_init__(self) -> None:
        buckets = tuple(sorted(((int(t), g) for t, g in self.buckets), key=lambda b: b[0], reverse=True))
        thresholds = [threshold for threshold, _ in buckets]
        if len(set(thresholds)) != len(thresholds):
            raise ValueError(f"Duplicate density thresholds: {thresholds}.")
        for glyph in [g for _, g in buckets] + [self.floor]:
            if not isinstance(glyph, str) or len(glyph) != 1:
                raise ValueError(f"Density glyphs must be single characters, got {glyph!r}.")
        object.__setattr__(self, "buckets", buckets)

    @classmethod
    def from_strings(cls, thresholds: str, glyphs: str) -> DensityMapper:
        """Build a mapper from ``"40,6,4,2"`` and ``" .+*#"``.

        ``glyphs`` lists one character per threshold (highest first) followed
        by the floor glyph.
        """

        try:
            values = [int(part) for part in thresholds.split(",") if part.strip()]
        except ValueError as exc:
            raise ValueError(f"Thresholds must be comma separated integers, got {thresholds!r}.") from exc
        if len(glyphs) != len(values) + 1:
            raise ValueError(
                f"Expected {len(values) + 1} glyphs for {len(values)} thresholds, got {len(glyphs)}."
            )
        ordered = sorted(values, reverse=True)
        if ordered != values:
            raise ValueError("Thresholds must be listed in descending order.")
        return cls(buckets=tuple(zip(values, glyphs[:-1])), floor=glyphs[-1])

    @property
    def alphabet(self) -> str:
        return "".join(glyph for _, glyph in self.buckets) + self.floor

    def map_to_glyph(self, count: int) -> str:
        for threshold, glyph in self.buckets:
            if count > threshold:
                return glyph
        return self.floor

    def map_row(self, counts: Iterable[int]) -> str:
        return "".join(self.map_to_glyph(int(count)) for count in counts)

    def __call__(self, count: int) -> str:
        return self.map_to_glyph(count)


DEFAULT_MAPPER = DensityMapper()


def map_to_glyph(count: int, mapper: DensityMapper | None = None) -> str:
    return (mapper or DEFAULT_MAPPER).map_to_glyph(count)


def map_rows(grid: Sequence[Sequence[int]], mapper: DensityMapper | None = None) -> tuple[str, ...]:
    mapper = mapper or DEFAULT_MAPPER
    return tuple(mapper.map_row(row) for row in grid)
