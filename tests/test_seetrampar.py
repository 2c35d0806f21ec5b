import pytest

from frsana.anapar import ParameterError
from frsana.seetrampar import FIT_KEY, SeetramCalPar


def test_defaults_match_container_definition():
    par = SeetramCalPar()
    assert par.name == "seetramCalPar"
    assert par.context == "SeetramCalParContext"
    assert par.num_params_fit == 2
    assert par.cal_params == [0.0, 0.0]


def test_put_params_writes_fit_count():
    par = SeetramCalPar(num_params_fit=5)
    store = {}
    par.put_params(store)
    assert store == {"SeetramFitPar": 5}


def test_put_params_ignores_missing_list():
    par = SeetramCalPar(num_params_fit=7)
    par.put_params(None)
    assert par.num_params_fit == 7


def test_round_trip():
    store = {}
    SeetramCalPar(num_params_fit=4).put_params(store)
    other = SeetramCalPar()
    other.get_params(store)
    assert other.num_params_fit == 4


def test_get_params_missing_key_raises():
    with pytest.raises(ParameterError):
        SeetramCalPar().get_params({})


def test_get_params_none_raises():
    with pytest.raises(ParameterError):
        SeetramCalPar().get_params(None)


def test_set_cal_param_stores_value():
    par = SeetramCalPar()
    par.set_cal_param(1.5, 1)
    assert par.cal_params == [0.0, 1.5]


def test_set_cal_param_out_of_range():
    with pytest.raises(IndexError):
        SeetramCalPar().set_cal_param(1.0, 2)


def test_clear_resets_status():
    par = SeetramCalPar(status=True)
    par.clear()
    assert par.status is False


def test_format_params_heading():
    assert SeetramCalPar().format_params().startswith("SeetramCalPar")
    assert FIT_KEY == "SeetramFitPar"