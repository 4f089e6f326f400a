# ! 밸브 수리계산 : 밸브 특성 곡선 및 밸브 사이징 (IEC 60534, 비압축성 유체)
# * 상대 개도 → 상대 Kv : 3-파라미터 log-logistic (dose-response) 곡선
# * Kv/유량 환산, zeta ↔ Kv, 배관 형상 계수 Fp/Flp, 초크 유동 한계

import math

from constants import G, RHO_REF, N1_KV, N2_KV, WATER_CRITICAL_PRESSURE_KPA
from errors import DomainError, require_finite, require_positive, require_non_negative
from hydraulics import reducer_zeta, diffuser_zeta

# * math.exp 오버플로 직전 지수
_EXP_LIMIT = 700.0


# ──────────────────────────────────────────────
# ? 밸브 고유 특성 곡선 (Dose-Response)
# ──────────────────────────────────────────────
def dose_response(x: float, b: float, d: float, e: float) -> float:
    """
    ! 3-파라미터 log-logistic 곡선

    y = d / (1 + exp(b × (ln x - ln e)))

    x : 상대 개도 (%), 0 이상
    b : 기울기 (b < 0 → 개도에 대해 증가, b > 0 → 감소)
    d : 상한 점근값 (상대 Kv의 최댓값)
    e : 변곡점 개도 (y = d/2 인 x), 양수

    * x = 0 은 극한값 반환: b > 0 → d, b < 0 → 0, b = 0 → d/2
    """
    require_non_negative("x", x)
    require_finite("b", b)
    require_finite("d", d)
    require_positive("e", e)

    if x == 0:
        if b > 0:
            return d
        if b < 0:
            return 0.0
        return d / 2.0

    z = b * (math.log(x) - math.log(e))
    if z > _EXP_LIMIT:
        return 0.0
    return d / (1.0 + math.exp(z))


# ──────────────────────────────────────────────
# ? Kv ↔ 유량 환산
# ──────────────────────────────────────────────
def _pressure_drop(p1: float, p2: float) -> float:
    """절대압 p1 > p2 > 0 검증 후 차압(bar) 반환"""
    require_positive("p2", p2)
    require_finite("p1", p1)
    if p1 <= p2:
        raise DomainError("p1", p1, f"하류 압력 p2={p2} bar 보다 커야 합니다")
    return p1 - p2


def kv(flow: float, p1: float, p2: float, density: float) -> float:
    """
    Kv = Q × √( (ρ/ρ₀) / Δp )

    flow    : 유량 (m³/h)
    p1, p2  : 밸브 전/후 절대압 (bar)
    density : 유체 밀도 (kg/m³)
    """
    require_non_negative("flow", flow)
    require_positive("density", density)
    dp = _pressure_drop(p1, p2)
    return flow * math.sqrt((density / RHO_REF) / dp)


def flow_kv(kv_val: float, p1: float, p2: float, density: float) -> float:
    """
    Q = Kv × √( Δp / (ρ/ρ₀) )
    반환 : 유량 (m³/h)
    """
    require_non_negative("kv", kv_val)
    require_positive("density", density)
    dp = _pressure_drop(p1, p2)
    return kv_val * math.sqrt(dp / (density / RHO_REF))


# ──────────────────────────────────────────────
# ? Kv ↔ zeta 환산
# ──────────────────────────────────────────────
def kv_value(dn: float, zeta: float) -> float:
    """
    Kv = dn² × √(N2 / ζ)

    dn   : 밸브 구경 (mm)
    zeta : 밸브 손실 계수 (dn 유속 기준)
    """
    require_positive("dn", dn)
    require_positive("zeta", zeta)
    return dn ** 2 * math.sqrt(N2_KV / zeta)


def zeta_value(dn: float, kv_val: float) -> float:
    """
    ζ = N2 × dn⁴ / Kv²

    dn : 밸브 구경 (mm)
    kv : 유량 계수 (m³/h)
    """
    require_positive("dn", dn)
    require_positive("kv", kv_val)
    return N2_KV * dn ** 4 / kv_val ** 2


def resistance_coefficient(dn: float, zeta: float) -> float:
    """
    ! 저항 계수 R : h = R × Q²

    dn   : 구경 (mm)
    zeta : 손실 계수
    반환 : R (m / (m³/h)²)
    """
    require_positive("dn", dn)
    require_non_negative("zeta", zeta)
    area = math.pi * (dn / 1000.0) ** 2 / 4.0
    return zeta / (2.0 * G * (3600.0 * area) ** 2)


# ──────────────────────────────────────────────
# ? 배관 형상 계수 (IEC 60534-2-1)
# ──────────────────────────────────────────────
def fp(kv_val: float, dnv: float, dn1: float, dn2: float) -> float:
    """
    ! 배관 형상 계수 Fp (밸브 전후 축관/확관 부착)

    Fp = 1 / √( 1 + (ΣK / N2) × (Kv / d²)² )
    ΣK = K1 + K2 + KB1 - KB2

    * K1  = 0.5 (1 - (d/D1)²)²    입구 축관
    * K2  = 1.0 (1 - (d/D2)²)²    출구 확관
    * KB  = 1 - (d/D)⁴           Bernoulli 계수
    """
    require_positive("kv", kv_val)
    k1 = reducer_zeta(dn1, dnv)
    k2 = diffuser_zeta(dnv, dn2)
    kb1 = 1.0 - (dnv / dn1) ** 4
    kb2 = 1.0 - (dnv / dn2) ** 4
    sum_k = k1 + k2 + kb1 - kb2
    term = 1.0 + (sum_k / N2_KV) * (kv_val / dnv ** 2) ** 2
    if term <= 0:
        raise DomainError("kv", kv_val, "배관 형상 계수 계산 불가 (1 + ΣK·(Kv/d²)²/N2 ≤ 0)")
    return 1.0 / math.sqrt(term)


def flp(kv_val: float, fl: float, dnv: float, dn1: float) -> float:
    """
    ! 부착 배관 포함 압력 회복 계수 Flp

    Flp = 1 / √( (Ki / N2) × (Kv / d²)² + 1 / Fl² ),  Ki = K1 + KB1
    """
    require_positive("kv", kv_val)
    require_positive("fl", fl)
    if fl > 1.0:
        raise DomainError("fl", fl, "1 이하여야 합니다")
    ki = reducer_zeta(dn1, dnv) + 1.0 - (dnv / dn1) ** 4
    term = (ki / N2_KV) * (kv_val / dnv ** 2) ** 2 + 1.0 / fl ** 2
    return 1.0 / math.sqrt(term)


def ff(pv: float, pc: float = WATER_CRITICAL_PRESSURE_KPA) -> float:
    """
    액체 임계 압력비 계수: Ff = 0.96 - 0.28 × √(pv / pc)

    pv : 증기압 (kPa)
    pc : 임계 압력 (kPa), 기본값 물
    """
    require_non_negative("pv", pv)
    require_positive("pc", pc)
    if pv > pc:
        raise DomainError("pv", pv, f"임계 압력 pc={pc} kPa 이하여야 합니다")
    return 0.96 - 0.28 * math.sqrt(pv / pc)


# ──────────────────────────────────────────────
# ? 초크 유동 한계 (Choked Flow)
# ──────────────────────────────────────────────
def _available_choke_pressure(p1: float, pv: float, ff_val: float) -> float:
    require_positive("p1", p1)
    require_non_negative("pv", pv)
    dp = p1 - ff_val * pv
    if dp <= 0:
        raise DomainError("p1", p1, f"Ff × pv = {ff_val * pv:.4f} bar 보다 커야 합니다")
    return dp


def dp_max(flp_val: float, fp_val: float, p1: float, pv: float, ff_val: float) -> float:
    """
    ΔPmax = (Flp / Fp)² × (p1 - Ff × pv)

    p1 : 입구 절대압 (bar)
    pv : 증기압 (bar)
    반환 : 초크 유동 시작 차압 (bar)
    """
    require_positive("flp", flp_val)
    require_positive("fp", fp_val)
    return (flp_val / fp_val) ** 2 * _available_choke_pressure(p1, pv, ff_val)


def q_max(kv_val: float, flp_val: float, p1: float, pv: float, ff_val: float, density: float) -> float:
    """
    Qmax = N1 × Flp × Kv × √( (p1 - Ff × pv) / (ρ/ρ₀) )

    반환 : 초크 유동 최대 유량 (m³/h)
    """
    require_positive("kv", kv_val)
    require_positive("flp", flp_val)
    require_positive("density", density)
    dp = _available_choke_pressure(p1, pv, ff_val)
    return N1_KV * flp_val * kv_val * math.sqrt(dp / (density / RHO_REF))
