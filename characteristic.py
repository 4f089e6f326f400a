# ! 밸브 수리계산 : 밸브 특성 곡선 피팅, 시스템 곡선, 설치 특성(Installed Characteristic)
# * scipy curve_fit 으로 측정 (개도, 상대 Kv) 데이터에 log-logistic 곡선 피팅
# * 이분법 솔버로 개도별 유량 / 목표 유량별 개도 역산

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.optimize import curve_fit

from constants import (
    DEFAULT_FIT_GUESS, DEFAULT_OPENINGS_PCT, DEFAULT_ROUGHNESS_MM,
    DOSE_RESPONSE_SOLVER, FLOW_SOLVER, LOGGER_NAME, SolverSettings,
)
from errors import DomainError, HydraulicError, require_positive
from hydraulics import bernoulli_head_loss, local_loss, velocity, velocity_head
from solver import DoseResponseParams, flow_from_head, opening_from_relative_kv
from valve import dose_response, kv_value, zeta_value

logger = logging.getLogger(f"{LOGGER_NAME}.characteristic")


# ──────────────────────────────────────────────
# ? 배관 형상 (밸브 zeta 제외)
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class PipeGeometry:
    """
    ! 밸브 전후 배관 형상

    dn1, dn2 : 상류/하류 배관 내경 (mm)
    dnv      : 밸브 구경 (mm)
    L1, L2   : 상류/하류 배관 길이 (m)
    Zup, Zdw : 상류/하류 이음쇠 zeta 합
    roughness: 절대 조도 (mm)
    """
    dn1: float
    dn2: float
    dnv: float
    L1: float
    L2: float
    Zup: float = 0.0
    Zdw: float = 0.0
    roughness: float = DEFAULT_ROUGHNESS_MM

    def head_loss(self, flow: float, Zv: float, temp: float) -> float:
        return bernoulli_head_loss(
            flow, self.dn1, self.dn2, self.dnv, self.L1, self.L2,
            self.Zup, self.Zdw, Zv, self.roughness, temp,
        )


# ──────────────────────────────────────────────
# ? 특성 곡선 피팅
# ──────────────────────────────────────────────

def _log_logistic(x, b, d, e):
    return d / (1.0 + np.exp(b * (np.log(x) - np.log(e))))


def fit_dose_response(
    openings: Sequence[float],
    relative_kv: Sequence[float],
    p0: Tuple[float, float, float] = DEFAULT_FIT_GUESS,
) -> DoseResponseParams:
    """
    ! 측정 밸브 특성 (개도 %, Kv/Kvs) 에 3-파라미터 log-logistic 곡선 피팅

    * 최소 3점, 개도는 모두 양수
    * d ≥ 0, e > 0 경계 조건
    """
    x = np.asarray(openings, dtype=float)
    y = np.asarray(relative_kv, dtype=float)
    if x.shape != y.shape:
        raise DomainError("relative_kv", len(y), f"개도 데이터 수({len(x)})와 같아야 합니다")
    if x.size < 3:
        raise DomainError("openings", x.size, "피팅에는 최소 3개의 점이 필요합니다")
    if np.any(x <= 0) or not np.all(np.isfinite(x)):
        raise DomainError("openings", x.tolist(), "모든 개도는 양의 유한값이어야 합니다")
    if not np.all(np.isfinite(y)):
        raise DomainError("relative_kv", y.tolist(), "모든 값이 유한해야 합니다")

    try:
        popt, _ = curve_fit(
            _log_logistic, x, y, p0=p0,
            bounds=([-np.inf, 0.0, 1e-9], [np.inf, np.inf, np.inf]),
            maxfev=10000,
        )
    except RuntimeError as exc:
        raise HydraulicError(f"특성 곡선 피팅이 수렴하지 않았습니다: {exc}") from exc

    params = DoseResponseParams(b=float(popt[0]), d=float(popt[1]), e=float(popt[2]))
    logger.info("특성 곡선 피팅: b=%.4f, d=%.4f, e=%.4f (%d점)", params.b, params.d, params.e, x.size)
    return params


# ──────────────────────────────────────────────
# ? 고유 특성 표 / 시스템 곡선
# ──────────────────────────────────────────────

def valve_characteristic(
    params: DoseResponseParams,
    kvs: float,
    openings: Optional[List[float]] = None,
) -> pd.DataFrame:
    """개도별 상대 Kv 및 Kv 표 (opening_pct, relative_kv, kv)"""
    require_positive("kvs", kvs)
    if openings is None:
        openings = DEFAULT_OPENINGS_PCT
    rows = []
    for x in openings:
        rel = dose_response(x, params.b, params.d, params.e)
        rows.append({"opening_pct": float(x), "relative_kv": rel, "kv": kvs * rel})
    return pd.DataFrame(rows, columns=["opening_pct", "relative_kv", "kv"])


def system_curve(
    flows: Sequence[float],
    geometry: PipeGeometry,
    Zv: float,
    temp: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """유량 격자에서의 총 손실 수두 (Q [m³/h], H [m])"""
    Q = np.asarray(flows, dtype=float)
    H = np.array([geometry.head_loss(float(q), Zv, temp) for q in Q])
    return Q, H


# ──────────────────────────────────────────────
# ? 설치 특성 (밸브 + 배관)
# ──────────────────────────────────────────────

def installed_flow(
    dh: float,
    opening: float,
    kvs: float,
    params: DoseResponseParams,
    geometry: PipeGeometry,
    temp: float,
    settings: SolverSettings = FLOW_SOLVER,
) -> float:
    """
    ! 가용 수두차 dh(m), 개도 opening(%) 에서의 유량(m³/h)

    * Kv = Kvs × dose_response(opening) → 밸브 zeta → flow_from_head
    * Kv = 0 (완전 닫힘) 이면 0
    * 탐색 하한은 0 m³/h: 거의 닫힌 밸브는 settings.x_lo 보다 작은 유량을 낼 수 있음
    """
    require_positive("kvs", kvs)
    kv_open = kvs * dose_response(opening, params.b, params.d, params.e)
    if kv_open == 0:
        return 0.0
    zv = zeta_value(geometry.dnv, kv_open)
    g = geometry
    # * 유량 0 에서 손실 수두는 정확히 0 → 하한 잔차는 항상 -dh
    return flow_from_head(
        dh, g.dn1, g.dn2, g.dnv, g.L1, g.L2, g.Zup, g.Zdw, zv, g.roughness, temp,
        settings=replace(settings, x_lo=0.0),
    )


def installed_characteristic(
    dh: float,
    kvs: float,
    params: DoseResponseParams,
    geometry: PipeGeometry,
    temp: float,
    openings: Optional[List[float]] = None,
    settings: SolverSettings = FLOW_SOLVER,
) -> pd.DataFrame:
    """
    ! 개도별 설치 특성 표

    columns: opening_pct, relative_kv, kv, zeta_valve, flow_m3h,
             velocity_valve_ms, authority

    * authority: 밸브에서 소모되는 수두 / dh
    """
    require_positive("dh", dh)
    if openings is None:
        openings = DEFAULT_OPENINGS_PCT

    rows = []
    for x in openings:
        rel = dose_response(x, params.b, params.d, params.e)
        kv_open = kvs * rel
        flow = installed_flow(dh, x, kvs, params, geometry, temp, settings)
        if kv_open == 0:
            zv = np.inf
            v_valve = 0.0
            authority = 1.0
        else:
            zv = zeta_value(geometry.dnv, kv_open)
            v_valve = velocity(flow, geometry.dnv)
            authority = local_loss(zv, v_valve) / dh
        rows.append({
            "opening_pct": float(x),
            "relative_kv": rel,
            "kv": kv_open,
            "zeta_valve": zv,
            "flow_m3h": flow,
            "velocity_valve_ms": v_valve,
            "authority": authority,
        })

    logger.debug("설치 특성 계산: dh=%.3f m, %d개 개도", dh, len(rows))
    return pd.DataFrame(rows)


def opening_for_flow(
    flow: float,
    dh: float,
    kvs: float,
    params: DoseResponseParams,
    geometry: PipeGeometry,
    temp: float,
    settings: SolverSettings = DOSE_RESPONSE_SOLVER,
) -> float:
    """
    ! 가용 수두차 dh 에서 목표 유량을 내는 개도(%) 역산

    1. 밸브를 제외한 손실 h_pipe = bernoulli(flow, Zv=0)
    2. 밸브 zeta = (dh - h_pipe) / (vv²/2g)
    3. Kv = kv_value(dnv, zeta) → Kv/Kvs → opening_from_relative_kv
    """
    require_positive("flow", flow)
    require_positive("dh", dh)
    require_positive("kvs", kvs)

    h_pipe = geometry.head_loss(flow, 0.0, temp)
    zv = (dh - h_pipe) / velocity_head(velocity(flow, geometry.dnv))
    if zv <= 0:
        raise DomainError(
            "flow", flow,
            f"배관 손실({h_pipe:.3f} m)이 가용 수두차({dh:.3f} m) 이상이라 도달할 수 없는 유량입니다",
        )
    relative_kv = kv_value(geometry.dnv, zv) / kvs
    return opening_from_relative_kv(relative_kv, params.b, params.d, params.e, settings=settings)
