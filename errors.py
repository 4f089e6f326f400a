# ! 밸브 수리계산: 예외 정의 및 입력값 검증 헬퍼
# * NaN 전파 대신 잘못된 입력을 즉시 명시적 예외로 보고합니다.

import math


class HydraulicError(Exception):
    """수리계산 모듈 공통 기본 예외"""


class DomainError(HydraulicError, ValueError):
    """
    ! 함수의 유효 정의역을 벗어난 입력

    * parameter: 문제가 된 파라미터 이름
    * value    : 입력값
    """

    def __init__(self, parameter: str, value, message: str = ""):
        self.parameter = parameter
        self.value = value
        detail = message or "유효 범위를 벗어났습니다"
        super().__init__(f"{parameter}: {detail}. (입력값: {value})")


class BracketError(HydraulicError, ValueError):
    """
    ! 초기 탐색 구간이 부호 변화를 포함하지 않음

    f(x_lo) - target 과 f(x_hi) - target 의 부호가 같거나 x_lo > x_hi 인 경우
    """

    def __init__(self, x_lo: float, x_hi: float, f_lo=None, f_hi=None, message: str = ""):
        self.x_lo = x_lo
        self.x_hi = x_hi
        self.f_lo = f_lo
        self.f_hi = f_hi
        if not message:
            message = (
                f"탐색 구간 [{x_lo}, {x_hi}]에 근이 없습니다. "
                f"(f_lo={f_lo}, f_hi={f_hi})"
            )
        super().__init__(message)


class ConvergenceError(HydraulicError, TimeoutError):
    """반복 상한 내에 구간 폭이 허용 오차 이하로 줄지 않음"""

    def __init__(self, iterations: int, x_lo: float, x_hi: float, tolerance: float):
        self.iterations = iterations
        self.x_lo = x_lo
        self.x_hi = x_hi
        self.tolerance = tolerance
        super().__init__(
            f"{iterations}회 반복 후에도 수렴하지 않았습니다. "
            f"(구간 [{x_lo}, {x_hi}], 폭 {x_hi - x_lo:.3e} > 허용 오차 {tolerance:.3e})"
        )


# ──────────────────────────────────────────────
# ? 입력값 검증 헬퍼
# ──────────────────────────────────────────────

def require_finite(name: str, value: float) -> float:
    if value is None or not math.isfinite(value):
        raise DomainError(name, value, "유한한 실수여야 합니다")
    return value


def require_positive(name: str, value: float) -> float:
    require_finite(name, value)
    if value <= 0:
        raise DomainError(name, value, "양수여야 합니다")
    return value


def require_non_negative(name: str, value: float) -> float:
    require_finite(name, value)
    if value < 0:
        raise DomainError(name, value, "0 이상이어야 합니다")
    return value
