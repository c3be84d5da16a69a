"""Linear scales mapping data values onto pixel coordinates."""

from __future__ import annotations

from typing import Tuple


class LinearScale:
    """
    Maps a numeric domain linearly onto an output range.

    A degenerate domain (both ends equal) maps every input to the middle of the
    range.
    """

    def __init__(self, domain: Tuple[float, float], range: Tuple[float, float]):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range[0]), float(range[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d0 == d1:
            return (r0 + r1) / 2
        t = (float(value) - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def __repr__(self) -> str:
        return f"LinearScale(domain={self.domain}, range={self.range})"


def format_coord(v: float) -> str:
    """Pixel coordinate as SVG path text."""
    if float(v).is_integer():
        return str(int(v))
    return f"{v:.6g}"
