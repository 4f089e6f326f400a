# ! 밸브 수리계산: 전역 상수 및 기본 파라미터 정의
# * 모든 모듈이 이 파일을 참조합니다.
# * 단위: 온도 °C, 유량 m³/h, 관경 mm, 길이 m, 조도 mm, 압력 bar(절대압)

from dataclasses import dataclass

# ──────────────────────────────────────────────
# ? 물리 상수
# ──────────────────────────────────────────────
G = 9.81                             # 중력가속도 (m/s²)
RHO_REF = 1000.0                     # Kv 정의 기준 밀도 (kg/m³)
WATER_CRITICAL_PRESSURE_KPA = 22064.0  # 물의 임계 압력 (kPa)
MMHG_TO_KPA = 0.133322               # 1 mmHg → kPa

# ──────────────────────────────────────────────
# ? 기준 온도 및 물성 상관식 유효 범위
#   모든 계산 함수는 수온을 인자로 받음 (기본값으로 대체하지 않음)
# ──────────────────────────────────────────────
REFERENCE_TEMPERATURE_C = 20.0
TEMP_MIN_C = 0.0
TEMP_MAX_C = 100.0
MAX_ALTITUDE_M = 44330.0             # 기압 공식 분모가 0이 되는 고도

# ──────────────────────────────────────────────
# ? 관마찰 파라미터
# ──────────────────────────────────────────────
LAMINAR_LIMIT_RE = 2200.0            # Re ≤ 2200 → 층류 (f = 64/Re)
DEFAULT_ROUGHNESS_MM = 0.045         # 탄소강 강관 절대 조도 (mm)

# ──────────────────────────────────────────────
# ? IEC 60534 수치 상수 (Kv, mm 단위계)
# ──────────────────────────────────────────────
N1_KV = 1.0        # m³/h, bar
N2_KV = 0.0016     # mm

# ──────────────────────────────────────────────
# ? 이분법(Bisection) 솔버 설정
# ──────────────────────────────────────────────
DEFAULT_MAX_ITERATIONS = 200


@dataclass(frozen=True)
class SolverSettings:
    """
    ! 역함수 탐색 구간 및 수렴 조건

    x_lo, x_hi     : 초기 탐색 구간
    tolerance      : 종료 시 구간 폭 (독립변수 기준 절대값)
    max_iterations : 반복 상한 (초과 시 ConvergenceError)
    """
    x_lo: float
    x_hi: float
    tolerance: float
    max_iterations: int = DEFAULT_MAX_ITERATIONS


# * 밸브 개도(%) 역산: 상대 Kv → 개도
DOSE_RESPONSE_SOLVER = SolverSettings(x_lo=0.0, x_hi=100.0, tolerance=1e-4)

# * 유량(m³/h) 역산: 가용 수두차 → 유량
FLOW_SOLVER = SolverSettings(x_lo=1e-5, x_hi=20.0, tolerance=1e-5)

# ──────────────────────────────────────────────
# ? 밸브 특성 곡선 기본값
# ──────────────────────────────────────────────
DEFAULT_OPENINGS_PCT = [5.0, 10.0, 20.0, 30.0, 40.0, 50.0, 60.0, 70.0, 80.0, 90.0, 100.0]
DEFAULT_FIT_GUESS = (-2.0, 1.0, 50.0)    # (b, d, e) 초기 추정값

# ──────────────────────────────────────────────
# ? 로깅
# ──────────────────────────────────────────────
LOGGER_NAME = "hyvasim"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
