"""성격 시그니처 인코딩과 거리 계산

시그니처는 `#HHMMSS` 형식의 6자리 16진수입니다.

- HH: hue. 원형 차원으로, 바이트 값 b를 `b / 256 * 360` 도로 해석
  (256개 바이트가 모두 서로 다른 방향)
- MM: manifested. 선형 차원 (0~255)
- SS: soul. 선형 차원 (0~255)

거리는 각 차원을 [0, 1]로 정규화한 뒤 유클리드 거리로 계산합니다.
hue는 원형 거리 `min(|a-b|, 360-|a-b|)`를 180으로 나눠 정규화하므로
가능한 최대 거리는 sqrt(3)입니다.
"""

import math
import re
from typing import Mapping, Union

import numpy as np

from soulmatch.domains.personality.exceptions import InvalidSignatureException
from soulmatch.domains.personality.types import Archetype, PersonalityVector

HUE_PERIOD = 360.0
LINEAR_MAX = 255
HUE_STEPS = 256
MAX_DISTANCE = math.sqrt(3)
DEFAULT_LINEAR_VALUE = 128

SIGNATURE_PATTERN = re.compile(r"^#[0-9A-F]{6}$", re.IGNORECASE)

ARCHETYPES: tuple[Archetype, ...] = (
    Archetype(
        0,
        "Cognitive",
        "The Analyst",
        "Thought, logic, analysis - rational and factual processing",
    ),
    Archetype(
        45,
        "Visionary",
        "The Innovator",
        "Creative imagination, openness - inventive and future-focused",
    ),
    Archetype(
        90,
        "Relational",
        "The Connector",
        "Emotional attunement, empathy - warm and community-driven",
    ),
    Archetype(
        135,
        "Nurturing",
        "The Harmonizer",
        "Care, support, harmony - compassionate and conflict-averse",
    ),
    Archetype(
        180,
        "Purposeful",
        "The Seeker",
        "Meaning-seeking, values-driven - cause-oriented and principled",
    ),
    Archetype(
        225,
        "Driven",
        "The Achiever",
        "Ambition, will, achievement - assertive and goal-oriented",
    ),
    Archetype(
        270,
        "Experiential",
        "The Explorer",
        "Sensing, presence, immersion - adventurous and present-focused",
    ),
    Archetype(
        315,
        "Analytical",
        "The Organizer",
        "Systematic, organizing, detail - methodical and structured",
    ),
)


def is_valid_signature(signature: str) -> bool:
    """시그니처 형식 검증 (대소문자 무관)"""
    return bool(SIGNATURE_PATTERN.match(signature or ""))


def normalize_signature(signature: str) -> str:
    """대문자 정규형 시그니처 반환

    Raises:
        InvalidSignatureException: 형식이 올바르지 않은 경우
    """
    if not is_valid_signature(signature):
        raise InvalidSignatureException(signature)
    return signature.upper()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def expand(signature: str) -> PersonalityVector:
    """시그니처를 성격 벡터로 펼치기

    Args:
        signature: `#HHMMSS` 형식 시그니처

    Returns:
        PersonalityVector

    Raises:
        InvalidSignatureException: 형식이 올바르지 않은 경우
    """
    code = normalize_signature(signature)[1:]
    hue_byte = int(code[0:2], 16)
    return PersonalityVector(
        hue=hue_byte / HUE_STEPS * HUE_PERIOD,
        manifested=int(code[2:4], 16),
        soul=int(code[4:6], 16),
    )


def compress(vector: PersonalityVector) -> str:
    """성격 벡터를 대문자 정규형 시그니처로 압축

    정규형 시그니처에 대해 `compress(expand(s)) == s.upper()` 가 성립합니다.
    """
    hue_byte = _round_half_up(vector.hue / HUE_PERIOD * HUE_STEPS) % HUE_STEPS
    return f"#{hue_byte:02X}{vector.manifested:02X}{vector.soul:02X}"


def circular_distance(a: float, b: float, period: float = HUE_PERIOD) -> float:
    """원형 차원의 거리 (주기에서 감싸기 고려)"""
    diff = abs(a - b) % period
    return min(diff, period - diff)


def normalized_deltas(
    a: PersonalityVector, b: PersonalityVector
) -> np.ndarray:
    """차원별 정규화된 거리 벡터 [hue, manifested, soul]"""
    return np.array(
        [
            circular_distance(a.hue, b.hue) / (HUE_PERIOD / 2),
            abs(a.manifested - b.manifested) / LINEAR_MAX,
            abs(a.soul - b.soul) / LINEAR_MAX,
        ],
        dtype=float,
    )


def distance(a: PersonalityVector, b: PersonalityVector) -> float:
    """두 성격 벡터 사이의 거리 (0 ~ sqrt(3), 대칭)"""
    return float(np.linalg.norm(normalized_deltas(a, b)))


def compatibility(a: PersonalityVector, b: PersonalityVector) -> float:
    """성격 호환도 `1 - distance / MAX_DISTANCE` (0.0~1.0)"""
    score = 1.0 - distance(a, b) / MAX_DISTANCE
    return min(1.0, max(0.0, score))


def signature_compatibility(signature_a: str, signature_b: str) -> float:
    """시그니처 문자열 두 개의 성격 호환도"""
    return compatibility(expand(signature_a), expand(signature_b))


def archetype_for(source: Union[PersonalityVector, float]) -> Archetype:
    """hue에 원형 거리상 가장 가까운 원형 반환 (동률이면 앞선 원형)"""
    hue = source.hue if isinstance(source, PersonalityVector) else source
    return min(
        ARCHETYPES,
        key=lambda archetype: circular_distance(hue, archetype.angle),
    )


def compute_hue(anchor_weights: Mapping[str, float]) -> float:
    """원형 가중치의 원형 평균으로 hue 계산

    Args:
        anchor_weights: 원형 이름(대소문자 무관) → 가중치. 0 이하는 무시

    Returns:
        0 이상 360 미만의 각도 (소수 둘째 자리 반올림). 가중치가 없으면 0
    """
    weights = {name.lower(): w for name, w in anchor_weights.items() if w > 0}
    active = [a for a in ARCHETYPES if a.name.lower() in weights]
    if not active:
        return 0.0

    angles = np.radians([a.angle for a in active])
    w = np.array([weights[a.name.lower()] for a in active], dtype=float)
    mean_sin = float(np.sum(w * np.sin(angles)) / w.sum())
    mean_cos = float(np.sum(w * np.cos(angles)) / w.sum())

    hue = math.degrees(math.atan2(mean_sin, mean_cos)) % HUE_PERIOD
    hue = round(hue, 2)
    return 0.0 if hue >= HUE_PERIOD else hue


def compute_manifested(parameters: Mapping[str, float]) -> int:
    """0~100 척도 파라미터 평균을 0~255로 변환 (없으면 128)"""
    values = [v for v in parameters.values() if 0 <= v <= 100]
    if not values:
        return DEFAULT_LINEAR_VALUE
    scaled = float(np.mean(values)) * 2.55
    return max(0, min(LINEAR_MAX, _round_half_up(scaled)))


def compute_soul(parameters: Mapping[str, float]) -> int:
    """0~100 척도 파라미터 평균에 제곱근 스케일을 적용해 0~255로 변환"""
    values = [v for v in parameters.values() if 0 <= v <= 100]
    if not values:
        return DEFAULT_LINEAR_VALUE
    scaled = math.sqrt(float(np.mean(values)) / 100) * LINEAR_MAX
    return max(0, min(LINEAR_MAX, _round_half_up(scaled)))


def generate_signature(
    anchor_weights: Mapping[str, float],
    manifested_params: Mapping[str, float],
    soul_params: Mapping[str, float],
) -> str:
    """평가 결과로부터 시그니처 생성"""
    vector = PersonalityVector(
        hue=compute_hue(anchor_weights),
        manifested=compute_manifested(manifested_params),
        soul=compute_soul(soul_params),
    )
    return compress(vector)
