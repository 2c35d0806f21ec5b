import pytest

from frsana.anapar import FrsAnaPar, ParameterError

SCALAR_KEYS = [
    "MagnificationS2S4",
    "DisperisionS2S4",
    "PathS2S4",
    "ToFS2S4",
    "DistTpcS2",
    "DistTpcS4",
    "PosFocalS2",
    "PosFocalS4",
    "Rho_S0_S2",
    "Bfield_S0_S2",
    "Rho_S2_S4",
    "Bfield_S2_S4",
]


def _filled():
    return FrsAnaPar(
        mag_s2s4=1.2,
        disp_s2s4=-7.5,
        path_s2s4=36.0,
        tof_s2s4=190.0,
        dist_tpc_s2=1000.0,
        dist_tpc_s4=1500.0,
        pos_focal_s2=250.0,
        pos_focal_s4=300.0,
        rho_s0_s2=11.2,
        bfield_s0_s2=1.4,
        rho_s2_s4=11.3,
        bfield_s2_s4=1.5,
        ana_params=[0.5, 2.0, 0.25],
    )


def test_defaults_match_container_identity():
    par = FrsAnaPar()
    assert par.name == "frsAnaPar"
    assert par.title == "FRS S2-S4 Parameters"
    assert par.context == "FRSANAParContext"
    assert par.num_params == 3
    assert par.ana_params == [0.0, 0.0, 0.0]


def test_put_writes_all_keys():
    stored = {}
    _filled().put_params(stored)
    assert set(stored) == set(SCALAR_KEYS) | {"frsAnaPar", "frsAnaNumberPar"}
    assert stored["frsAnaNumberPar"] == 3
    assert stored["PathS2S4"] == 36.0


def test_round_trip():
    original = _filled()
    stored = {}
    original.put_params(stored)
    restored = FrsAnaPar()
    restored.get_params(stored)
    assert restored == original


def test_put_resizes_array_to_count():
    par = FrsAnaPar(num_params=5, ana_params=[1.0, 2.0, 3.0])
    stored = {}
    par.put_params(stored)
    assert stored["frsAnaPar"][:3] == [1.0, 2.0, 3.0]
    assert len(stored["frsAnaPar"]) == 5
    assert stored["frsAnaPar"][3:] == [0.0, 0.0]


@pytest.mark.parametrize("key", SCALAR_KEYS + ["frsAnaNumberPar", "frsAnaPar"])
def test_get_missing_key_raises(key):
    stored = {}
    _filled().put_params(stored)
    del stored[key]
    with pytest.raises(ParameterError, match=key):
        FrsAnaPar().get_params(stored)


def test_get_without_list_raises():
    with pytest.raises(ParameterError):
        FrsAnaPar().get_params(None)


def test_get_array_length_mismatch_raises():
    stored = {}
    _filled().put_params(stored)
    stored["frsAnaPar"] = [1.0, 2.0]
    with pytest.raises(ParameterError):
        FrsAnaPar().get_params(stored)


def test_get_reads_larger_array_count():
    stored = {}
    _filled().put_params(stored)
    stored["frsAnaNumberPar"] = 4
    stored["frsAnaPar"] = [1.0, 2.0, 3.0, 4.0]
    par = FrsAnaPar()
    par.get_params(stored)
    assert par.num_params == 4
    assert par.ana_params == [1.0, 2.0, 3.0, 4.0]


def test_set_ana_param_stores_value():
    par = FrsAnaPar()
    par.set_ana_param(4.5, 2)
    assert par.ana_params == [0.0, 0.0, 4.5]


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_set_ana_param_out_of_range(index):
    with pytest.raises(IndexError):
        FrsAnaPar().set_ana_param(1.0, index)


def test_format_params():
    par = FrsAnaPar(ana_params=[1.5, 2.0, -0.25])
    assert par.format_params() == "Params = 1.5,2, -0.25"


def test_clear_resets_status():
    par = FrsAnaPar(status=True)
    par.clear()
    assert par.status is False