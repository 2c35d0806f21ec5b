"""Multi-wire proportional chambers: raw TDC times to x and y positions."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

log = logging.getLogger(__name__)

# Rows of the TDC gain table.
ANODE = 0
XL = 1
XR = 2
YU = 3
YD = 4
NUM_CHANNELS = 5

DETECTOR_NAMES: tuple[str, ...] = (
    "MW11",
    "MW21",
    "MW22",
    "MW31",
    "MW41",
    "MW42",
    "MW51",
    "MW61",
    "MW71",
    "MW81",
    "MW82",
    "MWB1",
    "MWB2",
)

# Accepted open interval for the x and y control sums.
CSUM_LOW = 1
CSUM_HIGH = 8000
CSUM_BASE = 1000


@dataclass(frozen=True)
class MwMappedData:
    """Raw TDC times of one chamber: anode, x left/right, y up/down."""

    det_id: int
    an: float
    xl: float
    xr: float
    yu: float
    yd: float


@dataclass(frozen=True)
class MwHitData:
    """Position, in mm, measured by one chamber."""

    det_id: int
    x: float
    y: float


@dataclass(frozen=True)
class MwCalibration:
    """TDC gains and position factors and offsets for every chamber.

    ``gain_tdc`` is indexed by channel (anode, XL, XR, YU, YD) and then by
    detector; the other tables are indexed by detector.
    """

    gain_tdc: tuple[tuple[float, ...], ...]
    x_factor: tuple[float, ...]
    x_offset: tuple[float, ...]
    y_factor: tuple[float, ...]
    y_offset: tuple[float, ...]

    def __post_init__(self) -> None:
        gains = tuple(tuple(float(v) for v in row) for row in self.gain_tdc)
        object.__setattr__(self, "gain_tdc", gains)
        for name in ("x_factor", "x_offset", "y_factor", "y_offset"):
            object.__setattr__(
                self, name, tuple(float(v) for v in getattr(self, name))
            )
        if len(gains) != NUM_CHANNELS:
            raise ValueError(
                f"expected {NUM_CHANNELS} rows of TDC gains, got {len(gains)}"
            )
        size = len(self.x_factor)
        tables: Sequence[Sequence[float]] = (
            *gains,
            self.x_offset,
            self.y_factor,
            self.y_offset,
        )
        if any(len(table) != size for table in tables):
            raise ValueError("all calibration tables must cover the same detectors")

    @property
    def num_dets(self) -> int:
        """Number of chambers the calibration covers."""
        return len(self.x_factor)


def default_calibration() -> MwCalibration:
    """Return the standard calibration of the thirteen FRS chambers."""
    # MW82 has a 4 ns/mm delay line, all others 2 ns/mm.
    factors = (0.25,) * 10 + (0.125,) + (0.25,) * 2
    return MwCalibration(
        gain_tdc=(
            (
                0.302929, 0.306064, 0.301179, 0.304426, 0.298871, 0.297881,
                0.307892, 0.298266, 0.303602, 0.306041, 0.31314, 0.299973,
                0.306923,
            ),
            (
                0.303253, 0.306958, 0.311121, 0.312163, 0.284086, 0.287364,
                0.289894, 0.311, 0.300082, 0.288468, 0.287279, 0.311, 0.311,
            ),
            (
                0.303975, 0.307799, 0.303233, 0.305609, 0.288656, 0.289636,
                0.292366, 0.305, 0.286092, 0.293831, 0.284028, 0.305, 0.305,
            ),
            (
                0.308414, 0.297774, 0.300558, 0.304716, 0.286589, 0.291135,
                0.284708, 0.337, 0.294287, 0.281296, 0.28051, 0.337, 0.337,
            ),
            (
                0.309826, 0.310235, 0.301105, 0.293695, 0.29269, 0.289867,
                0.28186, 0.289, 0.291341, 0.279099, 0.28743, 0.289, 0.289,
            ),
        ),
        x_factor=factors,
        x_offset=(
            5.0, -2.0, -1.5, -0.205, 0.0, -9.0, 0.0, 0.0, 1.642, 1.0, -5.0,
            0.0, 0.0,
        ),
        y_factor=factors,
        y_offset=(
            -14.0, 21.0, -1.0, 0.0, 0.0, 0.0, 0.0, 0.0, -2.736, 3.2, 0.764,
            0.0, 0.0,
        ),
    )


class MwMapped2Hit:
    """Converts raw chamber times into calibrated positions."""

    def __init__(self, calibration: Optional[MwCalibration] = None):
        self.calibration = calibration if calibration is not None else default_calibration()
        log.info("MwMapped2Hit: Nb detectors: %d", self.num_dets)

    @property
    def num_dets(self) -> int:
        """Number of chambers this converter knows."""
        return self.calibration.num_dets

    def make_hits(self, mapped: Iterable[MwMappedData]) -> list[MwHitData]:
        """Return one hit for every entry whose x and y control sums are valid."""
        cal = self.calibration
        hits: list[MwHitData] = []
        for data in mapped:
            det = data.det_id
            if not 0 <= det < cal.num_dets:
                raise ValueError(f"MW detector id {det} out of range")
            xsum = CSUM_BASE + (data.xl - data.an) + (data.xr - data.an)
            ysum = CSUM_BASE + (data.yu - data.an) + (data.yd - data.an)
            if not (CSUM_LOW < xsum < CSUM_HIGH and CSUM_LOW < ysum < CSUM_HIGH):
                continue
            gain = cal.gain_tdc
            r_x = data.xl * gain[XL][det] - data.xr * gain[XR][det]
            r_y = data.yd * gain[YD][det] - data.yu * gain[YU][det]
            hits.append(
                MwHitData(
                    det,
                    cal.x_factor[det] * r_x + cal.x_offset[det],
                    cal.y_factor[det] * r_y + cal.y_offset[det],
                )
            )
        return hits

    def process(self, *args: Optional[Iterable[MwMappedData]]) -> list[MwHitData]:
        """Convert one event's data from several chambers, skipping absent ones.

        Hits are returned in the order the collections are given.
        """
        hits: list[MwHitData] = []
        for mapped in args:
            if mapped is not None:
                hits.extend(self.make_hits(mapped))
        return hits