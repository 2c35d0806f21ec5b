from dataclasses import dataclass

import pytest

from frsana.anapar import FrsAnaPar
from frsana.analysis import FrsHit2AnaS4, MusicHitData, SciSingleTcalData
from frsana.calibration import FrsHit2AnaS4Par, FrsMappedTof


@dataclass(frozen=True)
class Tpc:
    detector_id: int
    x: float


OPTICS = dict(
    mag_s2s4=1.0,
    disp_s2s4=1.0,
    path_s2s4=1.0,
    tof_s2s4=1.0,
    dist_tpc_s2=1000.0,
    dist_tpc_s4=1000.0,
    pos_focal_s2=0.0,
    pos_focal_s4=0.0,
)


def make_cal(cut_z=50, **extra):
    return FrsHit2AnaS4Par(
        FrsAnaPar(), [2.0, 2.0, 6.0, 6.0], [1.0, 1.0, 1.0, 1.0], cut_z=cut_z, **OPTICS, **extra
    )


def tpcs(a, b, c, d):
    return [Tpc(0, a), Tpc(1, b), Tpc(2, c), Tpc(3, d)]


def test_rhos_are_averaged_per_section():
    cal = make_cal()
    assert cal.rho_s0_s2 == 2.0
    assert cal.rho_s2_s4 == 6.0
    assert cal.bfield_s2_s4 == 1.0


def test_too_few_rhos_raise():
    with pytest.raises(ValueError):
        FrsHit2AnaS4Par(FrsAnaPar(), [1.0, 1.0, 1.0], [1.0] * 4)


def test_event_outside_charge_window_is_ignored():
    cal = make_cal(cut_z=50)
    cal.process([FrsMappedTof(0, 0)], tpcs(0, 1, 2, 3), [MusicHitData(60.0)])
    assert cal.points == []


def test_event_with_fewer_than_four_tpc_hits_is_ignored():
    cal = make_cal(cut_z=50)
    cal.process([FrsMappedTof(0, 0)], tpcs(0, 1, 2, 3)[:3], [MusicHitData(50.0)])
    assert cal.points == []


def test_charge_cut_is_truncated_to_integer():
    cal = make_cal(cut_z=50.9)
    cal.process([FrsMappedTof(0, 0)], tpcs(0, 1, 2, 3), [MusicHitData(49.6)])
    assert len(cal.points) == 1


def test_recorded_point_matches_identification():
    cal = make_cal(cut_z=50)
    cal.process([FrsMappedTof(0, 0)], tpcs(1.0, 3.0, 1.0, 3.0), [MusicHitData(50.0)])
    par = FrsAnaPar(rho_s2_s4=6.0, bfield_s2_s4=1.0, **OPTICS)
    reference = FrsHit2AnaS4(par).process(
        [SciSingleTcalData((0.0,))], tpcs(1.0, 3.0, 1.0, 3.0), [MusicHitData(50.0)]
    )[0]
    (angle, aq), = cal.points
    assert angle == pytest.approx(reference.angle_s2)
    assert aq == pytest.approx(reference.aq)


def test_finish_fits_slope_and_stores_means():
    cal = make_cal()
    cal.points.extend([(-1.0, 1.0), (0.0, 2.0), (1.0, 3.0)])
    par = cal.finish()
    assert par.num_params == 3
    assert par.ana_params[0] == pytest.approx(0.0, abs=1e-12)
    assert par.ana_params[1] == pytest.approx(2.0)
    assert par.ana_params[2] == pytest.approx(1.0)
    assert par.rho_s2_s4 == 6.0
    assert par.path_s2s4 == OPTICS["path_s2s4"]


def test_points_outside_histogram_do_not_change_result():
    base = make_cal()
    base.points.extend([(-1.0, 1.0), (0.0, 2.0), (1.0, 3.0)])
    with_outlier = make_cal()
    with_outlier.points.extend([(-1.0, 1.0), (0.0, 2.0), (1.0, 3.0), (20.0, 2.0)])
    assert with_outlier.finish().ana_params == pytest.approx(base.finish().ana_params)


def test_finish_without_enough_points_raises():
    cal = make_cal()
    cal.points.append((0.0, 2.0))
    with pytest.raises(ValueError):
        cal.finish()