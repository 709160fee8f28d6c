from __future__ import annotations

import argparse
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

GOLDEN_ROOT = Path("tests/golden")


@dataclass
class Golden:
    name: str
    args: list[str]
    rows: int
    width: int

    @property
    def path(self) -> Path:
        return GOLDEN_ROOT / f"{self.name}.txt"

    def full_args(self) -> list[str]:
        return [sys.executable, "fractal.py", *self.args]


GOLDENS: list[Golden] = [
    Golden(name="mandelbrot", args=["mandelbrot"], rows=40, width=80),
    Golden(name="burning_ship", args=["burning-ship"], rows=40, width=80),
    Golden(name="mandelbrot_accumulate", args=["mandelbrot", "--stepping", "accumulate"], rows=40, width=81),
]


def _render(golden: Golden) -> str:
    completed = subprocess.run(golden.full_args(), check=True, capture_output=True, text=True)
    return completed.stdout


def _verify_shape(golden: Golden, text: str) -> None:
    lines = text.splitlines()
    if len(lines) != golden.rows:
        raise RuntimeError(f"{golden.name}: expected {golden.rows} rows, got {len(lines)}")
    widths = {len(line) for line in lines}
    if widths != {golden.width}:
        raise RuntimeError(f"{golden.name}: expected rows of width {golden.width}, got {sorted(widths)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Regenerate or check the golden fractal patterns.")
    parser.add_argument("--check", action="store_true",
                        help="compare against the stored files instead of overwriting them.")
    opt = parser.parse_args()

    GOLDEN_ROOT.mkdir(parents=True, exist_ok=True)
    mismatches = []
    for golden in GOLDENS:
        print(f"[golden] {golden.name}")
        text = _render(golden)
        _verify_shape(golden, text)
        if opt.check:
            if not golden.path.is_file() or golden.path.read_text() != text:
                mismatches.append(golden.name)
        else:
            golden.path.write_text(text)

    if mismatches:
        raise RuntimeError(f"Golden patterns differ: {', '.join(mismatches)}")
    print("\nAll golden patterns up to date." if opt.check else "\nAll golden patterns written.")


if __name__ == "__main__":
    main()
