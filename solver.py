# ! 밸브 수리계산 : 이분법(Bisection) 역함수 솔버
# * 닫힌 형태의 역함수가 없는 순방향 모델 f(x, params)에서 f(x) = target 인 x 탐색
# * 순방향 모델: 밸브 특성 곡선(개도 역산), Bernoulli 손실 수두(유량 역산)

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, NamedTuple, Optional, Union

from constants import (
    DEFAULT_MAX_ITERATIONS, DOSE_RESPONSE_SOLVER, FLOW_SOLVER,
    LOGGER_NAME, SolverSettings,
)
from errors import (
    BracketError, ConvergenceError, DomainError,
    require_finite, require_positive, require_non_negative,
)
from hydraulics import bernoulli_head_loss
from valve import dose_response

logger = logging.getLogger(f"{LOGGER_NAME}.solver")


# ──────────────────────────────────────────────
# ? 순방향 모델 고정 파라미터
# ──────────────────────────────────────────────

class DoseResponseParams(NamedTuple):
    """밸브 특성 곡선 파라미터 (y = d / (1 + exp(b (ln x - ln e))))"""
    b: float
    d: float
    e: float


class BernoulliParams(NamedTuple):
    """
    ! 관로 + 밸브 시스템 고정 파라미터 (유량을 제외한 모든 입력)

    * 관경 mm, 길이 m, 조도 mm, 수온 °C
    """
    dn1: float
    dn2: float
    dnv: float
    L1: float
    L2: float
    Zup: float
    Zdw: float
    Zv: float
    roughness: float
    temp: float


class ForwardModel(Enum):
    """
    ! 솔버가 역산하는 순방향 모델 (태그 열거형)

    * evaluate(x, fixed_params) 시그니처 고정
    """
    DOSE_RESPONSE = "dose_response"
    BERNOULLI = "bernoulli"

    def evaluate(self, x: float, fixed_params) -> float:
        if self is ForwardModel.DOSE_RESPONSE:
            b, d, e = fixed_params
            return dose_response(x, b, d, e)
        return bernoulli_head_loss(x, *fixed_params)


ForwardFunction = Callable[[float, tuple], float]


@dataclass
class BisectionResult:
    """
    root       : 마지막 중점 (반복 0회이면 x_lo 또는 목표값과 일치한 끝점)
    iterations : 구간 반분 횟수
    x_lo, x_hi : 종료 시 구간
    f_root     : f(root) - target (계산하지 않았으면 None)
    """
    root: float
    iterations: int
    x_lo: float
    x_hi: float
    f_root: Optional[float] = None


# ──────────────────────────────────────────────
# ? 이분법 본체
# ──────────────────────────────────────────────

def expected_iterations(x_lo: float, x_hi: float, tolerance: float) -> int:
    """구간 폭이 tolerance 이하가 될 때까지 필요한 반분 횟수: ⌈log₂((x_hi - x_lo) / tol)⌉"""
    width = x_hi - x_lo
    if width <= tolerance:
        return 0
    return math.ceil(math.log2(width / tolerance))


def _as_function(forward: Union[ForwardModel, ForwardFunction]) -> ForwardFunction:
    if isinstance(forward, ForwardModel):
        return forward.evaluate
    if not callable(forward):
        raise DomainError("forward", forward, "ForwardModel 또는 f(x, params) 함수여야 합니다")
    return forward


def _residual(func: ForwardFunction, x: float, fixed_params, target: float) -> float:
    value = func(x, fixed_params)
    if value is None or not math.isfinite(value):
        raise DomainError("forward", value, f"x={x} 에서 순방향 모델 값이 유한하지 않습니다")
    return value - target


def bisect(
    target: float,
    forward: Union[ForwardModel, ForwardFunction],
    fixed_params,
    x_lo: float,
    x_hi: float,
    tolerance: float,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> BisectionResult:
    """
    ! f(x, fixed_params) = target 인 x를 [x_lo, x_hi] 안에서 이분법으로 탐색

    1. f_lo = f(x_lo) - target, f_hi = f(x_hi) - target
    2. (x_hi - x_lo) > tolerance 인 동안:
         x_mid = (x_lo + x_hi) / 2
         f_mid × f_lo < 0 → x_hi = x_mid, 아니면 x_lo = x_mid
    3. 마지막 x_mid 반환

    * 구간 폭 ≤ tolerance: 모델 평가 없이 x_lo 반환 (반복 0회)
    * 끝점이 정확히 target: 그 끝점 반환 (반복 0회)
    * 끝점 부호가 같으면 BracketError
    * f_mid == 0 이어도 조기 종료하지 않음 (구간은 그 근 쪽으로 계속 축소)
    * 반복 상한 초과 시 ConvergenceError
    """
    require_finite("target", target)
    require_finite("x_lo", x_lo)
    require_finite("x_hi", x_hi)
    require_positive("tolerance", tolerance)
    if max_iterations < 0:
        raise DomainError("max_iterations", max_iterations, "0 이상이어야 합니다")
    if x_lo > x_hi:
        raise BracketError(
            x_lo, x_hi,
            message=f"x_lo({x_lo})가 x_hi({x_hi})보다 큽니다.",
        )

    func = _as_function(forward)

    if (x_hi - x_lo) <= tolerance:
        logger.debug("구간 폭 %.3e ≤ 허용 오차 %.3e, x_lo=%g 반환", x_hi - x_lo, tolerance, x_lo)
        return BisectionResult(root=x_lo, iterations=0, x_lo=x_lo, x_hi=x_hi)

    f_lo = _residual(func, x_lo, fixed_params, target)
    f_hi = _residual(func, x_hi, fixed_params, target)

    if f_lo == 0:
        return BisectionResult(root=x_lo, iterations=0, x_lo=x_lo, x_hi=x_hi, f_root=0.0)
    if f_hi == 0:
        return BisectionResult(root=x_hi, iterations=0, x_lo=x_lo, x_hi=x_hi, f_root=0.0)
    if (f_lo < 0) == (f_hi < 0):
        raise BracketError(x_lo, x_hi, f_lo, f_hi)

    iterations = 0
    x_mid = x_lo
    f_mid = f_lo
    while (x_hi - x_lo) > tolerance:
        if iterations >= max_iterations:
            raise ConvergenceError(iterations, x_lo, x_hi, tolerance)

        x_mid = (x_lo + x_hi) / 2.0
        f_mid = _residual(func, x_mid, fixed_params, target)
        iterations += 1

        if f_mid != 0 and (f_mid < 0) != (f_lo < 0):
            x_hi, f_hi = x_mid, f_mid
        else:
            x_lo = x_mid
            # * f_mid == 0 이면 f_lo 부호 유지: 이후 중점은 x_lo(정확한 근) 쪽으로 수렴
            if f_mid != 0:
                f_lo = f_mid

    logger.debug(
        "이분법 수렴: root=%.8g, %d회 반복, 최종 구간 [%.8g, %.8g]",
        x_mid, iterations, x_lo, x_hi,
    )
    return BisectionResult(
        root=x_mid, iterations=iterations, x_lo=x_lo, x_hi=x_hi, f_root=f_mid,
    )


def solve_bisection(
    target: float,
    forward: Union[ForwardModel, ForwardFunction],
    fixed_params,
    x_lo: float,
    x_hi: float,
    tolerance: float,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> float:
    """bisect()의 스칼라 반환 버전"""
    return bisect(target, forward, fixed_params, x_lo, x_hi, tolerance, max_iterations).root


# ──────────────────────────────────────────────
# ? 모델별 역산 함수
# ──────────────────────────────────────────────

def opening_from_relative_kv(
    relative_kv: float,
    b: float,
    d: float,
    e: float,
    settings: SolverSettings = DOSE_RESPONSE_SOLVER,
) -> float:
    """
    ! 목표 상대 Kv를 내는 밸브 상대 개도(%) 역산

    relative_kv : 목표 Kv / Kvs
    b, d, e     : 특성 곡선 파라미터
    settings    : 탐색 구간/허용 오차 (기본 [0, 100] %, 1e-4)
    """
    return solve_bisection(
        relative_kv, ForwardModel.DOSE_RESPONSE, DoseResponseParams(b, d, e),
        settings.x_lo, settings.x_hi, settings.tolerance, settings.max_iterations,
    )


def flow_from_head(
    dh: float,
    dn1: float, dn2: float, dnv: float,
    L1: float, L2: float,
    Zup: float, Zdw: float, Zv: float,
    roughness: float, temp: float,
    settings: SolverSettings = FLOW_SOLVER,
) -> float:
    """
    ! 가용 수두차 Dh(m)를 모두 소모하는 유량(m³/h) 역산

    * bernoulli_head_loss(flow, ...) = dh
    * settings: 탐색 구간/허용 오차 (기본 [1e-5, 20] m³/h, 1e-5)
    * dh == 0 이면 유량 0 (Bernoulli 손실은 유량 0 에서만 0)
    """
    require_non_negative("dh", dh)
    if dh == 0:
        return 0.0
    params = BernoulliParams(dn1, dn2, dnv, L1, L2, Zup, Zdw, Zv, roughness, temp)
    return solve_bisection(
        dh, ForwardModel.BERNOULLI, params,
        settings.x_lo, settings.x_hi, settings.tolerance, settings.max_iterations,
    )
