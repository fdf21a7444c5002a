from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import PIL.Image

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "320", "--height", "180"]


@dataclass
class Expected:
    path: Path
    width: int = 320
    height: int = 180


@dataclass
class Example:
    name: str
    args: list[str]
    expected: Expected

    def full_args(self) -> list[str]:
        return [sys.executable, "render_bmp.py", *self.args, "--output", str(self.expected.path)]


def _example(name: str, filename: str, *args: str, width: int = 320, height: int = 180) -> Example:
    return Example(
        name=name,
        args=[*BASE_ARGS, *args],
        expected=Expected(EXAMPLES_ROOT / name / filename, width=width, height=height),
    )


EXAMPLES: list[Example] = [
    _example("default", "default.bmp"),
    _example("x-bounds", "seahorse-valley.bmp", "--xleft", "-0.8", "--xright", "-0.7", "--ylower", "0.05"),
    _example("y-bounds", "upper-plane.bmp", "--ylower", "0.2", "--yupper", "1.0", "--xright", "0.4"),
    _example("all-bounds", "stretched.bmp", "--xleft", "-2", "--xright", "1", "--ylower", "-1", "--yupper", "1"),
    _example("ambiguous", "fallback.bmp", "--xleft", "-1.5"),
    Example(
        name="size",
        args=["--width", "333", "--height", "201"],
        expected=Expected(EXAMPLES_ROOT / "size" / "odd-size.bmp", width=333, height=201),
    ),
    Example(
        name="size-out-of-range",
        args=["--width", "20000", "--height", "0"],
        expected=Expected(EXAMPLES_ROOT / "size-out-of-range" / "default-size.bmp", width=1920, height=1080),
    ),
    _example("max-iterations", "deep.bmp", "--max-iterations", "250"),
    _example("threshold", "silhouette.bmp", "--threshold", "35"),
    _example("workers", "single-worker.bmp", "--workers", "1"),
    _example("verbose", "diagnostic.bmp", "--verbose"),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            shutil.rmtree(path)


def _verify(example: Example) -> None:
    expected = example.expected
    if not expected.path.is_file():
        raise RuntimeError(f"Expected file {expected.path} was not created")
    with PIL.Image.open(expected.path) as image:
        if image.format != "BMP" or image.size != (expected.width, expected.height):
            raise RuntimeError(
                f"{expected.path} decoded as {image.format} {image.size}, "
                f"expected BMP {(expected.width, expected.height)}"
            )
        image.load()


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _ensure_clean([example.expected.path.parent])
        example.expected.path.parent.mkdir(parents=True, exist_ok=True)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
