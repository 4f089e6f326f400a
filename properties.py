# ! 밸브 수리계산: 물의 물성치 (온도 함수)
# * 증기압(Antoine), 대기압(기압 공식), 밀도(Tanaka), 점성계수(Vogel)

from constants import (
    MMHG_TO_KPA, TEMP_MIN_C, TEMP_MAX_C, MAX_ALTITUDE_M,
)
from errors import DomainError, require_finite


def _check_temperature(temp: float) -> float:
    """물성 상관식 유효 범위(0~100°C) 검증"""
    require_finite("temp", temp)
    if temp < TEMP_MIN_C or temp > TEMP_MAX_C:
        raise DomainError(
            "temp", temp, f"{TEMP_MIN_C:g}~{TEMP_MAX_C:g}°C 범위여야 합니다"
        )
    return temp


# ──────────────────────────────────────────────
# ? 증기압 (Vapour Pressure)
# ──────────────────────────────────────────────
def vapour_pressure(temp: float) -> float:
    """
    ! Antoine 식에 의한 물의 포화 증기압

    log₁₀ p[mmHg] = 8.07131 - 1730.63 / (233.426 + T)

    temp : 온도 (°C)
    반환 : 증기압 (kPa)
    """
    _check_temperature(temp)
    p_mmhg = 10.0 ** (8.07131 - 1730.63 / (233.426 + temp))
    return p_mmhg * MMHG_TO_KPA


# ──────────────────────────────────────────────
# ? 대기압 (고도 함수)
# ──────────────────────────────────────────────
def atm_pressure(masl: float) -> float:
    """
    p = 1.01325 × (1 - 2.25577e-5 × h)^5.25588

    masl : 해발 고도 (m)
    반환 : 대기압 (bar)
    """
    require_finite("masl", masl)
    if masl >= MAX_ALTITUDE_M:
        raise DomainError("masl", masl, f"{MAX_ALTITUDE_M:g} m 미만이어야 합니다")
    return 1.01325 * (1.0 - 2.25577e-5 * masl) ** 5.25588


# ──────────────────────────────────────────────
# ? 밀도 (Density)
# ──────────────────────────────────────────────
def water_density(temp: float) -> float:
    """
    ! Tanaka(2001) 상관식에 의한 물의 밀도

    ρ = 999.97495 × [1 - (T - 3.983035)² (T + 301.797) / (522528.9 (T + 69.34881))]

    temp : 온도 (°C)
    반환 : 밀도 (kg/m³)
    """
    _check_temperature(temp)
    t = temp
    return 999.974950 * (
        1.0 - (t - 3.983035) ** 2 * (t + 301.797) / (522528.9 * (t + 69.34881))
    )


# ──────────────────────────────────────────────
# ? 점성계수 (Viscosity)
# ──────────────────────────────────────────────
def dynamic_viscosity(temp: float) -> float:
    """
    Vogel 식: μ = 0.02414 × 10^(247.8 / (T + 133.15))

    temp : 온도 (°C)
    반환 : 점성계수 (mPa·s)
    """
    _check_temperature(temp)
    return 0.02414 * 10.0 ** (247.8 / (temp + 133.15))


def kinematic_viscosity(temp: float) -> float:
    """
    ν = μ / ρ

    temp : 온도 (°C)
    반환 : 동점성계수 (mm²/s = m²/s × 1e-6)
    """
    return dynamic_viscosity(temp) / water_density(temp) * 1000.0


def vapour_pressure_bar(temp: float) -> float:
    """증기압(bar): 밸브 사이징 식의 압력 단위에 맞춤"""
    return vapour_pressure(temp) / 100.0
