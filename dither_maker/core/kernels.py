"""Error-diffusion kernel presets.

Each kernel is a weight table, a divisor, and the column of the top row that
holds the pixel being quantized. Weights to the right of that column on the
top row, and anywhere on the rows below, receive a share of the error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable


class KernelError(ValueError):
    """Raised when a kernel cannot be used for error diffusion."""


class KernelName(str, Enum):
    ATKINSON = "atkinson"
    FLOYD_STEINBERG = "floyd_steinberg"
    SHTUKI = "shtuki"
    SIERRA_LITE = "sierra_lite"


@dataclass(frozen=True)
class Kernel:
    name: str
    weights: tuple[tuple[int, ...], ...]
    divisor: float
    anchor: int
    label: str = ""

    def __post_init__(self) -> None:
        if not self.weights or not self.weights[0]:
            raise KernelError(f"{self.name}: kernel has no weights")
        width = len(self.weights[0])
        for row in self.weights:
            if len(row) != width:
                raise KernelError(f"{self.name}: rows must all have {width} columns")
            if any(w < 0 for w in row):
                raise KernelError(f"{self.name}: weights must be non-negative")
        if not any(w for row in self.weights for w in row):
            raise KernelError(f"{self.name}: kernel has no nonzero weight")
        if not self.divisor > 0:
            raise KernelError(f"{self.name}: divisor must be positive, got {self.divisor}")
        if not 0 <= self.anchor < width:
            raise KernelError(f"{self.name}: anchor {self.anchor} outside row of {width}")
        # The anchor and everything left of it on the top row are already quantized
        if any(self.weights[0][: self.anchor + 1]):
            raise KernelError(
                f"{self.name}: top-row weights must lie right of the anchor"
            )

    @property
    def offsets(self) -> list[tuple[int, int, float]]:
        """Nonzero weights as (dx, dy, weight / divisor), in table order."""
        result = []
        for dy, row in enumerate(self.weights):
            for col, w in enumerate(row):
                if w:
                    result.append((col - self.anchor, dy, w / self.divisor))
        return result

    @property
    def total_weight(self) -> int:
        return sum(w for row in self.weights for w in row)


KERNELS: dict[KernelName, Kernel] = {
    KernelName.ATKINSON: Kernel(
        KernelName.ATKINSON.value,
        ((0, 0, 1, 1), (1, 1, 1, 0), (0, 1, 0, 0)),
        8.0,
        # Column 1, not the reference program's fixed -2 offset, which hits the current pixel
        anchor=1,
        label="Atkinson",
    ),
    KernelName.FLOYD_STEINBERG: Kernel(
        KernelName.FLOYD_STEINBERG.value,
        ((0, 0, 7), (3, 5, 1)),
        16.0,
        anchor=1,
        label="Floyd-Steinberg",
    ),
    KernelName.SHTUKI: Kernel(
        KernelName.SHTUKI.value,
        ((0, 0, 0, 8, 4), (2, 4, 8, 4, 2), (1, 2, 4, 2, 1)),
        42.0,
        anchor=2,
        label="Shtuki",
    ),
    KernelName.SIERRA_LITE: Kernel(
        KernelName.SIERRA_LITE.value,
        ((0, 0, 2), (1, 1, 0)),
        4.0,
        anchor=1,
        label="Sierra Lite",
    ),
}

DEFAULT_KERNEL = KernelName.ATKINSON


def lookup_kernel(choice: str | int | None) -> Kernel | None:
    """Find a kernel by name, 1-based menu index, or display label.

    Returns None when nothing matches.
    """
    if choice is None:
        return None
    if isinstance(choice, KernelName):
        return KERNELS[choice]

    text = str(choice).strip()
    names = list(KernelName)
    if text.isascii() and text.isdecimal():
        idx = int(text)
        if 1 <= idx <= len(names):
            return KERNELS[names[idx - 1]]
        return None

    key = text.lower().replace("-", "_").replace(" ", "_")
    for kernel in KERNELS.values():
        label_key = kernel.label.lower().replace("-", "_").replace(" ", "_")
        if key in (kernel.name, label_key):
            return kernel
    return None


def resolve_kernel(
    choice: str | int | None,
    on_fallback: Callable[[str], None] | None = None,
) -> Kernel:
    """Like lookup_kernel(), but unknown choices fall back to Atkinson.

    Args:
        choice: kernel name, 1-based index, or label.
        on_fallback: optional callback(message) invoked when falling back.
    """
    kernel = lookup_kernel(choice)
    if kernel is not None:
        return kernel
    if on_fallback:
        default = KERNELS[DEFAULT_KERNEL]
        on_fallback(f"Invalid choice {choice!r}. Using {default.label} dithering by default.")
    return KERNELS[DEFAULT_KERNEL]
