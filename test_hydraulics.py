# Pipe hydraulics tests - ASCII only
import math
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from constants import G, LAMINAR_LIMIT_RE
from errors import DomainError
from hydraulics import (
    bar_to_head, bernoulli_head_loss, darcy_weisbach, diffuser_zeta,
    friction_colebrook, friction_factor_re, head_to_bar, local_loss,
    reducer_zeta, reynolds_number, velocity, velocity_head,
)
from properties import kinematic_viscosity

SYSTEM = dict(dn1=50.0, dn2=65.0, dnv=40.0, L1=12.0, L2=8.0,
              Zup=1.5, Zdw=2.0, Zv=4.0, roughness=0.045, temp=20.0)


def _swamee_jain(re, rr):
    return 0.25 / math.log10(rr / 3.7 + 5.74 / re ** 0.9) ** 2


# == [1] velocity / Reynolds ==

def test_velocity_of_one_metre_per_second():
    area = math.pi * 0.1 ** 2 / 4.0
    assert velocity(area * 3600.0, 100.0) == pytest.approx(1.0)


def test_zero_flow_has_zero_velocity():
    assert velocity(0.0, 50.0) == 0.0


def test_reynolds_number_from_viscosity():
    v = velocity(10.0, 50.0)
    expected = v * 0.05 / (kinematic_viscosity(20.0) * 1e-6)
    assert reynolds_number(10.0, 50.0, 20.0) == pytest.approx(expected)


# == [2] friction factor ==

def test_friction_laminar_limit_boundary():
    rr = 0.045 / 50.0
    assert friction_factor_re(2199.99, rr) == 64.0 / 2199.99
    assert friction_factor_re(2200.0, rr) == 64.0 / 2200.0
    assert friction_factor_re(2200.01, rr) == _swamee_jain(2200.01, rr)
    assert friction_factor_re(2200.01, rr) != 64.0 / 2200.01
    assert LAMINAR_LIMIT_RE == 2200.0


def test_friction_colebrook_laminar_branch():
    re = reynolds_number(0.05, 50.0, 20.0)
    assert re < LAMINAR_LIMIT_RE
    assert friction_colebrook(0.05, 50.0, 0.045, 20.0) == pytest.approx(64.0 / re)


def test_friction_colebrook_turbulent_branch():
    re = reynolds_number(10.0, 50.0, 20.0)
    assert re > LAMINAR_LIMIT_RE
    assert friction_colebrook(10.0, 50.0, 0.045, 20.0) == pytest.approx(_swamee_jain(re, 0.045 / 50.0))


def test_rougher_pipe_has_higher_friction():
    smooth = friction_colebrook(10.0, 50.0, 0.0, 20.0)
    rough = friction_colebrook(10.0, 50.0, 0.5, 20.0)
    assert rough > smooth > 0


@pytest.mark.parametrize("flow", [0.0, -1.0])
def test_friction_requires_positive_flow(flow):
    with pytest.raises(DomainError) as exc_info:
        friction_colebrook(flow, 50.0, 0.045, 20.0)
    assert exc_info.value.parameter == "flow"


# == [3] Darcy-Weisbach ==

def test_darcy_weisbach_hand_calculation():
    flow, length, dn = 10.0, 100.0, 50.0
    v = flow / 3600.0 / (math.pi * 0.05 ** 2 / 4.0)
    re = v * 0.05 / (kinematic_viscosity(20.0) * 1e-6)
    f = _swamee_jain(re, 0.045 / dn)
    expected = f * (length / 0.05) * v ** 2 / (2.0 * G)
    assert darcy_weisbach(flow, length, dn, 0.045, 20.0) == pytest.approx(expected)


def test_darcy_weisbach_zero_flow_or_length():
    assert darcy_weisbach(0.0, 100.0, 50.0, 0.045, 20.0) == 0.0
    assert darcy_weisbach(10.0, 0.0, 50.0, 0.045, 20.0) == 0.0


def test_darcy_weisbach_scales_with_length():
    h10 = darcy_weisbach(8.0, 10.0, 50.0, 0.045, 20.0)
    h30 = darcy_weisbach(8.0, 30.0, 50.0, 0.045, 20.0)
    assert h30 == pytest.approx(3.0 * h10)


@pytest.mark.parametrize("kwargs, name", [
    (dict(flow=1.0, length=-1.0, dn=50.0, roughness=0.045, temp=20.0), "length"),
    (dict(flow=1.0, length=1.0, dn=0.0, roughness=0.045, temp=20.0), "dn"),
    (dict(flow=1.0, length=1.0, dn=50.0, roughness=-0.1, temp=20.0), "roughness"),
    (dict(flow=1.0, length=1.0, dn=50.0, roughness=0.045, temp=120.0), "temp"),
])
def test_darcy_weisbach_domain_errors(kwargs, name):
    with pytest.raises(DomainError) as exc_info:
        darcy_weisbach(**kwargs)
    assert exc_info.value.parameter == name


@pytest.mark.parametrize("rr", [1.0, 4.0])
def test_relative_roughness_of_one_or_more_is_rejected(rr):
    with pytest.raises(DomainError) as exc_info:
        friction_factor_re(3000.0, rr)
    assert exc_info.value.parameter == "relative_roughness"


@pytest.mark.parametrize("roughness", [50.0, 200.0])
def test_roughness_not_smaller_than_bore_is_rejected(roughness):
    with pytest.raises(DomainError) as exc_info:
        friction_colebrook(5.0, 50.0, roughness, 20.0)
    assert exc_info.value.parameter == "roughness"
    # zero-length and zero-flow segments are validated too
    with pytest.raises(DomainError):
        darcy_weisbach(5.0, 0.0, 50.0, roughness, 20.0)
    with pytest.raises(DomainError):
        darcy_weisbach(0.0, 10.0, 50.0, roughness, 20.0)


def test_bernoulli_rejects_roughness_larger_than_pipe():
    s = dict(SYSTEM, roughness=200.0)
    with pytest.raises(DomainError) as exc_info:
        bernoulli_head_loss(5.0, **s)
    assert exc_info.value.parameter == "roughness"


# == [4] local losses ==

def test_reducer_and_diffuser_zeta():
    assert reducer_zeta(50.0, 40.0) == pytest.approx(0.5 * (1.0 - 0.64) ** 2)
    assert diffuser_zeta(40.0, 50.0) == pytest.approx((1.0 - 0.64) ** 2)
    assert reducer_zeta(50.0, 50.0) == 0.0
    assert diffuser_zeta(50.0, 40.0) == 0.0


def test_local_loss_is_zeta_times_velocity_head():
    assert local_loss(2.0, 3.0) == pytest.approx(2.0 * 9.0 / (2.0 * G))
    with pytest.raises(DomainError):
        local_loss(-0.1, 3.0)


# == [5] Bernoulli chain ==

def test_bernoulli_single_zeta_equals_velocity_head():
    h = bernoulli_head_loss(5.0, 50.0, 50.0, 50.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.045, 20.0)
    assert h == pytest.approx(velocity_head(velocity(5.0, 50.0)))


def test_bernoulli_sums_all_terms():
    s = SYSTEM
    q = 6.0
    v1, v2, vv = velocity(q, s["dn1"]), velocity(q, s["dn2"]), velocity(q, s["dnv"])
    expected = (
        darcy_weisbach(q, s["L1"], s["dn1"], s["roughness"], s["temp"])
        + darcy_weisbach(q, s["L2"], s["dn2"], s["roughness"], s["temp"])
        + s["Zup"] * velocity_head(v1)
        + (s["Zv"] + reducer_zeta(s["dn1"], s["dnv"]) + diffuser_zeta(s["dnv"], s["dn2"])) * velocity_head(vv)
        + s["Zdw"] * velocity_head(v2)
    )
    assert bernoulli_head_loss(q, **SYSTEM) == pytest.approx(expected)


def test_bernoulli_zero_flow_is_zero():
    assert bernoulli_head_loss(0.0, **SYSTEM) == 0.0


def test_bernoulli_strictly_increasing_in_flow():
    flows = np.linspace(0.001, 20.0, 800)
    heads = np.array([bernoulli_head_loss(q, **SYSTEM) for q in flows])
    assert np.all(np.diff(heads) > 0)


def test_bernoulli_rejects_negative_zeta():
    bad = dict(SYSTEM, Zv=-1.0)
    with pytest.raises(DomainError) as exc_info:
        bernoulli_head_loss(1.0, **bad)
    assert exc_info.value.parameter == "Zv"


# == [6] pressure-head conversion ==

def test_head_pressure_conversion():
    assert head_to_bar(10.0, 1000.0) == pytest.approx(0.981)
    assert bar_to_head(0.981, 1000.0) == pytest.approx(10.0)
    with pytest.raises(DomainError):
        bar_to_head(1.0, 0.0)
