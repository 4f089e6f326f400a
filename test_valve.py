# Valve characteristic and sizing tests - ASCII only
import math
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from constants import G, WATER_CRITICAL_PRESSURE_KPA
from errors import DomainError
from hydraulics import local_loss, velocity
from valve import (
    dose_response, dp_max, ff, flow_kv, flp, fp, kv, kv_value,
    q_max, resistance_coefficient, zeta_value,
)


# == [1] dose-response curve ==

def test_dose_response_midpoint_is_half_of_upper_asymptote():
    assert dose_response(50.0, 2.0, 1.0, 50.0) == 0.5
    assert dose_response(40.0, -3.0, 0.8, 40.0) == pytest.approx(0.4)


def test_dose_response_limits_at_zero_opening():
    assert dose_response(0.0, 2.0, 0.9, 50.0) == 0.9
    assert dose_response(0.0, -2.0, 0.9, 50.0) == 0.0
    assert dose_response(0.0, 0.0, 0.9, 50.0) == 0.45


def test_dose_response_decreasing_for_positive_slope():
    x = np.linspace(0.5, 100.0, 400)
    y = np.array([dose_response(v, 2.0, 1.0, 50.0) for v in x])
    assert np.all(np.diff(y) < 0)


def test_dose_response_increasing_for_negative_slope():
    x = np.linspace(0.5, 100.0, 400)
    y = np.array([dose_response(v, -2.5, 1.0, 40.0) for v in x])
    assert np.all(np.diff(y) > 0)
    assert y[-1] < 1.0


def test_dose_response_saturates_instead_of_overflowing():
    assert dose_response(100.0, 5000.0, 1.0, 1.0) == 0.0


@pytest.mark.parametrize("args, name", [
    ((-1.0, 2.0, 1.0, 50.0), "x"),
    ((10.0, 2.0, 1.0, 0.0), "e"),
    ((10.0, float("nan"), 1.0, 50.0), "b"),
])
def test_dose_response_domain_errors(args, name):
    with pytest.raises(DomainError) as exc_info:
        dose_response(*args)
    assert exc_info.value.parameter == name


# == [2] Kv / flow ==

def test_kv_definition_at_one_bar():
    assert kv(10.0, 3.0, 2.0, 1000.0) == pytest.approx(10.0)
    assert flow_kv(10.0, 3.0, 2.0, 1000.0) == pytest.approx(10.0)


def test_kv_density_correction():
    assert kv(10.0, 5.0, 1.0, 998.2) == pytest.approx(10.0 * math.sqrt(0.9982 / 4.0))


def test_kv_requires_p1_above_p2_above_zero():
    with pytest.raises(DomainError) as exc_info:
        kv(10.0, 2.0, 2.0, 1000.0)
    assert exc_info.value.parameter == "p1"
    with pytest.raises(DomainError) as exc_info:
        flow_kv(10.0, 2.0, 0.0, 1000.0)
    assert exc_info.value.parameter == "p2"


# == [3] zeta / resistance ==

def test_kv_value_and_zeta_value_are_inverse():
    assert zeta_value(50.0, kv_value(50.0, 2.0)) == pytest.approx(2.0)
    assert kv_value(40.0, zeta_value(40.0, 12.5)) == pytest.approx(12.5)


def test_zeta_from_kv_reproduces_one_bar_loss():
    dn, kv_val = 50.0, 30.0
    h = local_loss(zeta_value(dn, kv_val), velocity(kv_val, dn))
    assert h == pytest.approx(1e5 / (1000.0 * G), rel=2e-3)


def test_resistance_coefficient_quadratic_law():
    dn, zeta, q = 40.0, 3.5, 5.0
    r = resistance_coefficient(dn, zeta)
    assert r * q ** 2 == pytest.approx(local_loss(zeta, velocity(q, dn)))


def test_zeta_value_rejects_zero_kv():
    with pytest.raises(DomainError) as exc_info:
        zeta_value(40.0, 0.0)
    assert exc_info.value.parameter == "kv"


# == [4] IEC 60534 factors ==

def test_piping_factors_without_fittings():
    assert fp(25.0, 50.0, 50.0, 50.0) == pytest.approx(1.0)
    assert flp(25.0, 0.9, 50.0, 50.0) == pytest.approx(0.9)


def test_piping_factors_with_reducers():
    fp_val = fp(40.0, 40.0, 65.0, 65.0)
    flp_val = flp(40.0, 0.9, 40.0, 65.0)
    assert 0.0 < fp_val < 1.0
    assert 0.0 < flp_val < 0.9


def test_flp_rejects_fl_above_one():
    with pytest.raises(DomainError):
        flp(25.0, 1.2, 40.0, 50.0)


def test_critical_pressure_ratio_factor():
    assert ff(0.0) == pytest.approx(0.96)
    assert ff(2.339) == pytest.approx(0.96 - 0.28 * math.sqrt(2.339 / WATER_CRITICAL_PRESSURE_KPA))
    with pytest.raises(DomainError):
        ff(30000.0)


def test_choked_limits_are_consistent():
    kv_val, flp_val, p1, pv = 20.0, 0.9, 5.0, 0.0234
    ff_val = ff(pv * 100.0)
    dp = dp_max(flp_val, 1.0, p1, pv, ff_val)
    assert dp == pytest.approx(0.81 * (p1 - ff_val * pv))
    qm = q_max(kv_val, flp_val, p1, pv, ff_val, 1000.0)
    assert qm == pytest.approx(flow_kv(kv_val, p1, p1 - dp, 1000.0))


def test_choked_limits_require_pressure_above_vapour():
    with pytest.raises(DomainError) as exc_info:
        dp_max(0.9, 1.0, 0.01, 0.02, 0.96)
    assert exc_info.value.parameter == "p1"
