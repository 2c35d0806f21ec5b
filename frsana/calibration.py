"""Derivation of the S2-S4 angle correction for A/q from a calibration run."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from frsana.anapar import FrsAnaPar
from frsana.analysis import (
    ATOMIC_MASS_UNIT,
    ELECTRON_CHARGE,
    NUM_TPCS,
    SPEED_OF_LIGHT,
    MusicHitData,
    _div,
    _sqrt,
    _trig,
)

log = logging.getLogger(__name__)

TAC_CAL_SC24_LL = -0.01045
TAC_CAL_SC24_RR = -0.01095

# Binning of the angle versus A/q histogram.
_HIST_X = (1000, -10.0, 10.0)
_HIST_Y = (1000, 0.0, 5.0)
# Binning and accepted value range of the profile used for the fit.
_PROFILE_X = (1000, -5.0, 5.0)
_PROFILE_Y_RANGE = (0.0, 5.0)


class _TpcHit(Protocol):
    detector_id: int
    x: float


@dataclass(frozen=True)
class FrsMappedTof:
    """Raw TAC values of the right and left SCI41 time-of-flight channels."""

    sci41_rt: int
    sci41_lt: int


def _in_axis(value: float, axis: tuple[int, float, float]) -> bool:
    _, low, high = axis
    return low <= value < high


def _bin_center(value: float, axis: tuple[int, float, float]) -> float:
    nbins, low, high = axis
    width = (high - low) / nbins
    index = int(nbins * (value - low) / (high - low))
    return low + (index + 0.5) * width


def _histogram_means(points: Sequence[tuple[float, float]]) -> tuple[float, float]:
    """Mean of x and y over the points that fall inside the histogram."""
    inside = [
        (x, y) for x, y in points if _in_axis(x, _HIST_X) and _in_axis(y, _HIST_Y)
    ]
    if not inside:
        return 0.0, 0.0
    count = len(inside)
    return sum(x for x, _ in inside) / count, sum(y for _, y in inside) / count


def _profile_slope(
    points: Sequence[tuple[float, float]], mean_x: float, mean_y: float
) -> float:
    """Slope of a straight line through the bin means of the centred profile."""
    low_y, high_y = _PROFILE_Y_RANGE
    bins: dict[float, list[float]] = {}
    for x, y in points:
        dx, dy = x - mean_x, y - mean_y
        if not low_y <= dy <= high_y or not _in_axis(dx, _PROFILE_X):
            continue
        bins.setdefault(_bin_center(dx, _PROFILE_X), []).append(dy)
    if len(bins) < 2:
        raise ValueError("not enough filled profile bins to fit a straight line")
    centers = list(bins)
    means = [sum(values) / len(values) for values in bins.values()]
    n = len(centers)
    cx = sum(centers) / n
    cy = sum(means) / n
    sxx = sum((c - cx) ** 2 for c in centers)
    sxy = sum((c - cx) * (m - cy) for c, m in zip(centers, means))
    return sxy / sxx


class FrsHit2AnaS4Par:
    """Collects angle and A/q at S4 for one charge and fits their correlation."""

    def __init__(
        self,
        par: FrsAnaPar,
        rhos: Sequence[float],
        bfields: Sequence[float],
        *,
        cut_z: float = 0,
        mag_s2s4: float = 0.0,
        disp_s2s4: float = 0.0,
        path_s2s4: float = 0.0,
        tof_s2s4: float = 0.0,
        dist_tpc_s2: float = 0.0,
        dist_tpc_s4: float = 0.0,
        pos_focal_s2: float = 0.0,
        pos_focal_s4: float = 0.0,
    ):
        if len(rhos) < 4 or len(bfields) < 4:
            raise ValueError("four bending radii and four magnetic fields are needed")
        self.par = par
        self.cut_z = int(cut_z)
        self.mag_s2s4 = mag_s2s4
        self.disp_s2s4 = disp_s2s4
        self.path_s2s4 = path_s2s4
        self.tof_s2s4 = tof_s2s4
        self.dist_tpc_s2 = dist_tpc_s2
        self.dist_tpc_s4 = dist_tpc_s4
        self.pos_focal_s2 = pos_focal_s2
        self.pos_focal_s4 = pos_focal_s4
        self.rho_s0_s2 = 0.5 * (rhos[0] + rhos[1])
        self.bfield_s0_s2 = 0.5 * (bfields[0] + bfields[1])
        self.rho_s2_s4 = 0.5 * (rhos[2] + rhos[3])
        self.bfield_s2_s4 = 0.5 * (bfields[2] + bfields[3])
        self.points: list[tuple[float, float]] = []
        log.info("FrsHit2AnaS4Par: Rho (S0-S2): %g", self.rho_s0_s2)
        log.info("FrsHit2AnaS4Par: B (S0-S2): %g", self.bfield_s0_s2)
        log.info("FrsHit2AnaS4Par: Rho (S2-S4): %g", self.rho_s2_s4)
        log.info("FrsHit2AnaS4Par: B (S2-S4): %g", self.bfield_s2_s4)
        log.info("FrsHit2AnaS4Par: Corrections for Z = %d", self.cut_z)

    def process(
        self,
        frs_hits: Iterable[FrsMappedTof],
        tpc_hits: Iterable[_TpcHit],
        music_hits: Iterable[MusicHitData],
    ) -> None:
        """Add one event's (angle at S4, A/q) point when its Z passes the cut.

        Events without scintillator or MUSIC hits, or with fewer than four TPC
        hits, are skipped.
        """
        frs = list(frs_hits)
        tpc = list(tpc_hits)
        music = list(music_hits)
        if not music or not frs or len(tpc) < NUM_TPCS:
            return

        charges = [hit.z for hit in music if hit.z > 1]
        z = sum(charges) / len(charges) if charges else 0.0

        tpc_x = [math.nan] * NUM_TPCS
        for hit in tpc:
            if not 0 <= hit.detector_id < NUM_TPCS:
                raise ValueError(f"TPC detector id {hit.detector_id} out of range")
            tpc_x[hit.detector_id] = hit.x

        last = frs[-1]
        tof_rr = int(last.sci41_rt)
        tof_ll = int(last.sci41_lt)

        angle_s2 = _div(tpc_x[1] - tpc_x[0], self.dist_tpc_s2) * 1000.0
        x_s2 = tpc_x[1] + self.pos_focal_s2 * _trig(math.tan, angle_s2 / 1000.0)

        angle_s4 = _div(tpc_x[3] - tpc_x[2], self.dist_tpc_s4) * 1000.0
        x_s4 = tpc_x[2] + self.pos_focal_s4 * _trig(math.tan, angle_s4 / 1000.0)

        tof_star = 0.5 * (TAC_CAL_SC24_LL * tof_ll + TAC_CAL_SC24_RR * tof_rr)
        beta = _div(self.path_s2s4, self.tof_s2s4 + tof_star) * 1e7 / SPEED_OF_LIGHT
        gamma = _div(1.0, _sqrt(1.0 - beta * beta))

        brho = (
            self.bfield_s2_s4
            * self.rho_s2_s4
            * (1.0 - _div(x_s4 / 1000.0 - self.mag_s2s4 * (x_s2 / 1000.0), self.disp_s2s4))
        )
        aq = _div(
            brho * ELECTRON_CHARGE,
            gamma * beta * SPEED_OF_LIGHT * ATOMIC_MASS_UNIT,
        )

        if self.cut_z - 0.5 < z < self.cut_z + 0.5:
            self.points.append((angle_s4, aq))

    def finish(self) -> FrsAnaPar:
        """Store the optics and the fitted angle correction in the parameter set.

        Raises ValueError if the collected points do not allow a line fit.
        """
        par = self.par
        par.num_params = 3
        par.ana_params = list(par.ana_params[:3]) + [0.0] * (3 - len(par.ana_params[:3]))

        par.mag_s2s4 = self.mag_s2s4
        par.disp_s2s4 = self.disp_s2s4
        par.path_s2s4 = self.path_s2s4
        par.tof_s2s4 = self.tof_s2s4
        par.dist_tpc_s2 = self.dist_tpc_s2
        par.dist_tpc_s4 = self.dist_tpc_s4
        par.rho_s0_s2 = self.rho_s0_s2
        par.rho_s2_s4 = self.rho_s2_s4
        par.bfield_s0_s2 = self.bfield_s0_s2
        par.bfield_s2_s4 = self.bfield_s2_s4
        par.pos_focal_s2 = self.pos_focal_s2
        par.pos_focal_s4 = self.pos_focal_s4

        mean_x, mean_y = _histogram_means(self.points)
        log.info("mean %g, %g", mean_x, mean_y)
        slope = _profile_slope(self.points, mean_x, mean_y)

        par.set_ana_param(mean_x, 0)
        par.set_ana_param(mean_y, 1)
        par.set_ana_param(slope, 2)
        return par