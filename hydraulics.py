# ! 밸브 수리계산 : 관로 수리계산 엔진
# * Darcy-Weisbach 주손실, Colebrook-White(양함수 근사) 마찰계수, zeta 국부손실
# * 상류 배관 → 축관 → 밸브 → 확관 → 하류 배관 에너지 손실 합산 (Bernoulli)

import math

from constants import G, LAMINAR_LIMIT_RE
from errors import DomainError, require_positive, require_non_negative, require_finite
from properties import kinematic_viscosity


# ──────────────────────────────────────────────
# ? 유량 → 유속 변환
# ──────────────────────────────────────────────
def velocity(flow: float, dn: float) -> float:
    """
    원형 배관 내 평균 유속
    flow : 유량 (m³/h)
    dn   : 내경 (mm)
    반환 : 유속 (m/s)
    """
    require_non_negative("flow", flow)
    require_positive("dn", dn)
    area = math.pi * (dn / 1000.0) ** 2 / 4.0   # 단면적 (m²)
    return flow / 3600.0 / area


# ──────────────────────────────────────────────
# ? 레이놀즈 수 (Reynolds Number)
# ──────────────────────────────────────────────
def reynolds_number(flow: float, dn: float, temp: float) -> float:
    """
    Re = V × D / ν

    flow : 유량 (m³/h)
    dn   : 내경 (mm)
    temp : 수온 (°C)
    """
    v = velocity(flow, dn)
    nu = kinematic_viscosity(temp)      # mm²/s
    return v * dn * 1000.0 / nu


# ──────────────────────────────────────────────
# ? 마찰계수 (Friction Factor)
# ──────────────────────────────────────────────
def _check_relative_roughness(name: str, relative_roughness: float) -> None:
    # ! ε/D ≥ 1 이면 Swamee-Jain 로그 인수가 1 이상 → 의미 없는 마찰계수
    require_non_negative(name, relative_roughness)
    if relative_roughness >= 1.0:
        raise DomainError(name, relative_roughness, "상대 조도 ε/D는 1 미만이어야 합니다")


def _check_roughness(roughness: float, dn: float) -> None:
    """절대 조도가 0 이상이고 내경보다 작은지 검증"""
    require_positive("dn", dn)
    require_non_negative("roughness", roughness)
    if roughness >= dn:
        raise DomainError("roughness", roughness, f"내경({dn:g} mm)보다 작아야 합니다")


def friction_factor_re(re: float, relative_roughness: float) -> float:
    """
    ! Darcy 마찰계수 (레이놀즈 수 기준)

    * 층류(Re ≤ 2200): f = 64/Re
    * 난류: Colebrook-White 양함수 근사 (Swamee-Jain)
        f = 0.25 / [log₁₀( (ε/D)/3.7 + 5.74/Re^0.9 )]²

    re                 : 레이놀즈 수
    relative_roughness : 상대 조도 ε/D, 0 이상 1 미만
    """
    require_positive("re", re)
    _check_relative_roughness("relative_roughness", relative_roughness)
    if re <= LAMINAR_LIMIT_RE:
        return 64.0 / re
    log_arg = relative_roughness / 3.7 + 5.74 / re ** 0.9
    return 0.25 / math.log10(log_arg) ** 2


def friction_colebrook(flow: float, dn: float, roughness: float, temp: float) -> float:
    """
    flow      : 유량 (m³/h), 0 초과
    dn        : 내경 (mm)
    roughness : 절대 조도 (mm)
    temp      : 수온 (°C)
    반환      : Darcy 마찰계수 (무차원)
    """
    require_positive("flow", flow)
    _check_roughness(roughness, dn)
    re = reynolds_number(flow, dn, temp)
    return friction_factor_re(re, roughness / dn)


# ──────────────────────────────────────────────
# ? 주손실 (Major Loss) : Darcy-Weisbach
# ──────────────────────────────────────────────
def velocity_head(v: float) -> float:
    """속도수두 v²/2g (m)"""
    return v ** 2 / (2.0 * G)


def darcy_weisbach(flow: float, length: float, dn: float, roughness: float, temp: float) -> float:
    """
    h_f = f × (L/D) × (V² / 2g)

    flow      : 유량 (m³/h)
    length    : 배관 길이 (m)
    dn        : 내경 (mm)
    roughness : 절대 조도 (mm)
    temp      : 수온 (°C)
    반환      : 손실 수두 (m)
    """
    require_non_negative("length", length)
    v = velocity(flow, dn)
    _check_roughness(roughness, dn)
    if flow == 0 or length == 0:
        return 0.0
    f = friction_colebrook(flow, dn, roughness, temp)
    return f * (length / (dn / 1000.0)) * velocity_head(v)


# ──────────────────────────────────────────────
# ? 부차 손실 (Local Loss) : zeta
# ──────────────────────────────────────────────
def local_loss(zeta: float, v: float) -> float:
    """
    h_m = ζ × (V² / 2g)

    zeta : 국부 손실 계수 (무차원)
    v    : 유속 (m/s)
    """
    require_non_negative("zeta", zeta)
    return zeta * velocity_head(v)


def reducer_zeta(dn_pipe: float, dn_valve: float) -> float:
    """
    ! 축관(Reducer) 손실 계수 : 밸브 유속 기준

    ζ = 0.5 × (1 - β²)²,  β = dn_valve / dn_pipe
    * 확대(β ≥ 1)이면 0
    """
    require_positive("dn_pipe", dn_pipe)
    require_positive("dn_valve", dn_valve)
    beta = dn_valve / dn_pipe
    if beta >= 1.0:
        return 0.0
    return 0.5 * (1.0 - beta ** 2) ** 2


def diffuser_zeta(dn_valve: float, dn_pipe: float) -> float:
    """
    ! 확관(Diffuser) 손실 계수 : Borda-Carnot, 밸브 유속 기준

    ζ = (1 - β²)²,  β = dn_valve / dn_pipe
    * 축소(β ≥ 1)이면 0
    """
    require_positive("dn_valve", dn_valve)
    require_positive("dn_pipe", dn_pipe)
    beta = dn_valve / dn_pipe
    if beta >= 1.0:
        return 0.0
    return (1.0 - beta ** 2) ** 2


# ──────────────────────────────────────────────
# ? 전체 손실 수두 : Bernoulli
# ──────────────────────────────────────────────
def bernoulli_head_loss(
    flow: float,
    dn1: float, dn2: float, dnv: float,
    L1: float, L2: float,
    Zup: float, Zdw: float, Zv: float,
    roughness: float, temp: float,
) -> float:
    """
    ! 상류 배관 + 밸브 + 하류 배관 총 손실 수두

    Dh = hf1 + hf2
         + Zup × v1²/2g
         + (Zv + ζ_reducer + ζ_diffuser) × vv²/2g
         + Zdw × v2²/2g

    flow      : 유량 (m³/h)
    dn1, dn2  : 상류/하류 배관 내경 (mm)
    dnv       : 밸브 공칭 구경 (mm)
    L1, L2    : 상류/하류 배관 길이 (m)
    Zup, Zdw  : 상류/하류 이음쇠 zeta 합
    Zv        : 밸브 zeta
    roughness : 절대 조도 (mm)
    temp      : 수온 (°C)
    반환      : 손실 수두 (m)

    * 유량에 대해 단조 증가 (층류→난류 전환점에서는 위로 불연속)
    """
    for name, zeta in (("Zup", Zup), ("Zdw", Zdw), ("Zv", Zv)):
        require_non_negative(name, zeta)
    require_finite("temp", temp)

    v1 = velocity(flow, dn1)
    v2 = velocity(flow, dn2)
    vv = velocity(flow, dnv)

    h_friction = (
        darcy_weisbach(flow, L1, dn1, roughness, temp)
        + darcy_weisbach(flow, L2, dn2, roughness, temp)
    )
    zeta_valve_total = Zv + reducer_zeta(dn1, dnv) + diffuser_zeta(dnv, dn2)
    h_local = (
        local_loss(Zup, v1)
        + local_loss(zeta_valve_total, vv)
        + local_loss(Zdw, v2)
    )
    return h_friction + h_local


# ──────────────────────────────────────────────
# ? 압력-수두 변환 유틸리티
# ──────────────────────────────────────────────
def head_to_bar(h_meters: float, rho: float) -> float:
    """수두(m) → 압력(bar) 변환: P = ρ × g × h / 10⁵"""
    return rho * G * h_meters / 1e5


def bar_to_head(p_bar: float, rho: float) -> float:
    """압력(bar) → 수두(m) 변환: h = P × 10⁵ / (ρ × g)"""
    if rho <= 0:
        raise DomainError("rho", rho, "양수여야 합니다")
    return p_bar * 1e5 / (rho * G)
