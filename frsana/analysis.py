"""Event-by-event identification (Z and A/q) between S2 and S4."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from frsana.anapar import FrsAnaPar

log = logging.getLogger(__name__)

SPEED_OF_LIGHT = 299792458.0  # m/s
ELECTRON_CHARGE = 1.60217662e-19  # C
ATOMIC_MASS_UNIT = 1.660538921e-27  # kg

NUM_TPCS = 4


class _TpcHit(Protocol):
    detector_id: int
    x: float


@dataclass(frozen=True)
class MusicHitData:
    """Charge measured by one ionisation chamber."""

    z: float


@dataclass(frozen=True)
class SciSingleTcalData:
    """Raw time-of-flight values, in ns, from the scintillators."""

    raw_tof_ns: tuple[float, ...]


@dataclass(frozen=True)
class FrsS4Data:
    """Identified fragment at S4."""

    z: float
    aq: float
    x_s2: float
    angle_s2: float
    x_s4: float
    beta: float


def _div(num: float, den: float) -> float:
    """Floating-point division with IEEE results for a zero denominator."""
    try:
        return num / den
    except ZeroDivisionError:
        if num == 0 or math.isnan(num):
            return math.nan
        return math.copysign(math.inf, num) * math.copysign(1.0, den)


def _sqrt(value: float) -> float:
    return math.sqrt(value) if value >= 0 else math.nan


def _trig(func, value: float) -> float:
    return func(value) if math.isfinite(value) else math.nan


class FrsHit2AnaS4:
    """Turns scintillator, TPC and MUSIC hits into Z and A/q at S4."""

    def __init__(self, par: FrsAnaPar, offset_aq: float = 0.0, offset_z: float = 0.0):
        self.offset_aq = offset_aq
        self.offset_z = offset_z
        self._mag_s2s4 = par.mag_s2s4
        self._disp_s2s4 = par.disp_s2s4
        self._path_s2s4 = par.path_s2s4
        self._tof_s2s4 = par.tof_s2s4
        self._dist_tpc_s2 = par.dist_tpc_s2
        self._dist_tpc_s4 = par.dist_tpc_s4
        self._rho_s2_s4 = par.rho_s2_s4
        self._bfield_s2_s4 = par.bfield_s2_s4
        self._pos_focal_s2 = par.pos_focal_s2
        self._pos_focal_s4 = par.pos_focal_s4
        params = list(par.ana_params) + [0.0] * 3
        self._parm0, self._parm1, self._rot_s4 = params[:3]
        log.info("FrsHit2AnaS4: Rho (S2-S4): %g", self._rho_s2_s4)
        log.info("FrsHit2AnaS4: B (S2-S4): %g", self._bfield_s2_s4)
        log.info(
            "FrsHit2AnaS4: Params %g : %g : %g", self._parm0, self._parm1, self._rot_s4
        )

    def process(
        self,
        sci_hits: Iterable[SciSingleTcalData],
        tpc_hits: Iterable[_TpcHit],
        music_hits: Iterable[MusicHitData],
    ) -> list[FrsS4Data]:
        """Analyse one event; return no data unless all three inputs have hits.

        TPC hits need ``detector_id`` (0 to 3) and ``x``; a detector without a
        hit leaves its position undefined (NaN).
        """
        sci = list(sci_hits)
        tpc = list(tpc_hits)
        music = list(music_hits)
        if not sci or not tpc or not music:
            return []

        charges = [hit.z for hit in music if hit.z > 1]
        z = sum(charges) / len(charges) if charges else 0.0

        tpc_x = [math.nan] * NUM_TPCS
        for hit in tpc:
            if not 0 <= hit.detector_id < NUM_TPCS:
                raise ValueError(f"TPC detector id {hit.detector_id} out of range")
            tpc_x[hit.detector_id] = hit.x

        tof_rr = tof_ll = sci[-1].raw_tof_ns[0]

        angle_s2 = _div(tpc_x[1] - tpc_x[0], self._dist_tpc_s2) * 1000.0
        x_s2 = tpc_x[1] + self._pos_focal_s2 * _trig(math.tan, angle_s2 / 1000.0)

        angle_s4 = _div(tpc_x[3] - tpc_x[2], self._dist_tpc_s4) * 1000.0
        x_s4 = tpc_x[2] + self._pos_focal_s4 * _trig(math.tan, angle_s4 / 1000.0)

        tof_star = 0.5 * (tof_ll + tof_rr)
        beta = _div(self._path_s2s4, self._tof_s2s4 + tof_star) * 1e7 / SPEED_OF_LIGHT
        gamma = _div(1.0, _sqrt(1.0 - beta * beta))

        brho = (
            self._bfield_s2_s4
            * self._rho_s2_s4
            * (1.0 - _div(x_s4 / 1000.0 - self._mag_s2s4 * (x_s2 / 1000.0), self._disp_s2s4))
        )
        aq = _div(
            brho * ELECTRON_CHARGE,
            gamma * beta * SPEED_OF_LIGHT * ATOMIC_MASS_UNIT,
        )

        rot = -1.0 * self._rot_s4
        aq = (
            (aq - self._parm1) * _trig(math.cos, rot)
            + (angle_s4 - self._parm0) * _trig(math.sin, rot)
            + self._parm1
        )

        return [
            FrsS4Data(
                z=z + self.offset_z,
                aq=aq + self.offset_aq,
                x_s2=x_s2,
                angle_s2=angle_s2,
                x_s4=x_s4,
                beta=beta,
            )
        ]