"""하이브리드 호환도 계산기

    total = veto * (hhc_weight * hhc + factual_weight * factual)

- hhc: 성격 시그니처 호환도 (personality.signature.compatibility)
- veto: 필수 조건을 하나라도 어기면 0, 아니면 1
- factual: 양쪽 모두 데이터가 있는 사실 항목만 사용한 가중 평균

veto가 0이면 사실 점수는 계산하지 않고 즉시 0점 결과를 반환합니다.
계산기는 두 프로필 스냅샷에 대한 순수 함수이므로 동시에 여러 후보를
채점해도 안전합니다.
"""

import math
from typing import Iterable, Mapping, Optional

from soulmatch.core.logging import get_logger
from soulmatch.domains.compatibility.types import (
    VETO_EXPLANATION,
    CompatibilityScore,
    ScoreBreakdown,
)
from soulmatch.domains.personality.signature import compatibility
from soulmatch.domains.profiles.models import (
    FactualProfile,
    PartnerPreferences,
    PreferenceAttribute,
    UserProfile,
    ValueRange,
)

logger = get_logger(__name__)

HEIGHT_DECAY_CM = 20.0
INTERACTION_DEPTH_DIVISOR = 100
SKIPPED_COMPONENT_PENALTY = 0.05
NEUTRAL_FACTUAL_SCORE = 0.5

NON_SMOKER = "never"
WANTS_CHILDREN = "wants children"
HAS_CHILDREN = "has children"

LIFESTYLE_FIELDS = ("exercise_habits", "sleeping_habits", "dietary_preferences")

# (하한 점수, 설명) 내림차순
EXPLANATION_BANDS: tuple[tuple[float, str], ...] = (
    (
        0.8,
        "Exceptional compatibility across personality and lifestyle "
        "dimensions",
    ),
    (0.6, "Strong compatibility with good potential for connection"),
    (0.4, "Moderate compatibility with some alignment areas"),
)
LIMITED_EXPLANATION = (
    "Limited compatibility - significant differences in core areas"
)

# 사실 항목 → 가중치 속성
COMPONENT_ATTRIBUTES: dict[str, PreferenceAttribute] = {
    "age": PreferenceAttribute.AGE,
    "height": PreferenceAttribute.HEIGHT,
    "relationship_goal": PreferenceAttribute.RELATIONSHIP_GOAL,
    "family_plans": PreferenceAttribute.FAMILY_PLANS,
    "interests": PreferenceAttribute.INTERESTS,
    "lifestyle": PreferenceAttribute.LIFESTYLE,
    "communication_style": PreferenceAttribute.COMMUNICATION_STYLE,
}


def _normalize(value: str) -> str:
    return value.strip().casefold()


def _normalized_set(values: Optional[Iterable[str]]) -> set[str]:
    return {_normalize(v) for v in values or () if v and v.strip()}


def age_compatibility(desired: ValueRange, age: float) -> float:
    """선호 범위 안이면 1.0, 밖이면 범위 중심 기준 가우시안 감쇠

    sigma = (max - min) / 4. 범위 폭이 0이면 범위 밖은 0.0입니다.
    """
    if desired.contains(age):
        return 1.0
    sigma = (desired.max - desired.min) / 4
    if sigma <= 0:
        return 0.0
    return math.exp(-((age - desired.center) ** 2) / (2 * sigma**2))


def height_compatibility(desired: ValueRange, height_cm: float) -> float:
    """선호 범위 안이면 1.0, 밖이면 벗어난 cm 만큼 선형 감쇠"""
    if desired.contains(height_cm):
        return 1.0
    deviation = min(abs(height_cm - desired.min), abs(height_cm - desired.max))
    return max(0.0, 1.0 - deviation / HEIGHT_DECAY_CM)


def accepted_set_match(accepted: Iterable[str], value: str) -> float:
    """허용 집합에 값이 있으면 1.0, 없으면 0.0"""
    return 1.0 if _normalize(value) in _normalized_set(accepted) else 0.0


def interest_overlap(
    seeker_interests: Iterable[str],
    candidate_interests: Iterable[str],
    preference_weights: Optional[Mapping[str, float]] = None,
) -> float:
    """관심사 자카드 유사도 |A∩B| / |A∪B|

    preference_weights가 있으면 각 관심사를 해당 가중치로 센 가중
    자카드를 사용합니다 (목록에 없는 관심사는 1.0).
    """
    a = _normalized_set(seeker_interests)
    b = _normalized_set(candidate_interests)
    union = a | b
    if not union:
        return 0.0
    if not preference_weights:
        return len(a & b) / len(union)

    weights = {_normalize(k): max(0.0, w) for k, w in preference_weights.items()}
    union_weight = sum(weights.get(i, 1.0) for i in union)
    if union_weight <= 0:
        return 0.0
    return sum(weights.get(i, 1.0) for i in a & b) / union_weight


def lifestyle_match(
    seeker: FactualProfile, candidate: FactualProfile
) -> Optional[float]:
    """운동/수면/식습관 일치율 평균 (양쪽 모두 있는 항목만, 없으면 None)"""
    matches = [
        1.0 if _normalize(mine) == _normalize(theirs) else 0.0
        for mine, theirs in (
            (getattr(seeker, f), getattr(candidate, f)) for f in LIFESTYLE_FIELDS
        )
        if mine and theirs
    ]
    if not matches:
        return None
    return sum(matches) / len(matches)


def explanation_for(total_score: float) -> str:
    """총점 구간별 설명 문구"""
    for threshold, text in EXPLANATION_BANDS:
        if total_score >= threshold:
            return text
    return LIMITED_EXPLANATION


def find_veto_violation(
    preferences: PartnerPreferences, candidate: FactualProfile
) -> Optional[str]:
    """필수 조건 위반 항목 이름 반환 (위반이 없으면 None)

    순서대로 검사하며 첫 위반에서 멈춥니다. 나이/성별/키 범위는 선호와
    후보 값이 모두 있을 때만 검사합니다.
    """
    if (
        preferences.desired_age_range is not None
        and candidate.age is not None
        and not preferences.desired_age_range.contains(candidate.age)
    ):
        return "age_range"

    if (
        preferences.interested_in_genders
        and candidate.gender_identity
        and _normalize(candidate.gender_identity)
        not in _normalized_set(preferences.interested_in_genders)
    ):
        return "gender"

    if (
        preferences.desired_partner_height is not None
        and candidate.height_cm is not None
        and not preferences.desired_partner_height.contains(candidate.height_cm)
    ):
        return "height_range"

    veto = preferences.veto_criteria
    smoking = _normalize(candidate.smoking_habits or "")
    family = _normalize(candidate.family_plans or "")
    interests = _normalized_set(candidate.interests)

    if veto.non_smoker_only and smoking != NON_SMOKER:
        return "non_smoker_only"
    if veto.must_want_children and family != WANTS_CHILDREN:
        return "must_want_children"
    if veto.must_not_have_children and family == HAS_CHILDREN:
        return "must_not_have_children"
    if (
        veto.minimum_age is not None
        and candidate.age is not None
        and candidate.age < veto.minimum_age
    ):
        return "minimum_age"
    if (
        veto.maximum_age is not None
        and candidate.age is not None
        and candidate.age > veto.maximum_age
    ):
        return "maximum_age"
    if interests & _normalized_set(veto.deal_breaker_interests):
        return "deal_breaker_interests"
    if not _normalized_set(veto.required_interests) <= interests:
        return "required_interests"
    return None


class CompatibilityScorer:
    """성격 호환도와 가중 사실 점수를 결합하는 계산기

    Example:
        >>> scorer = CompatibilityScorer(hhc_weight=0.6, factual_weight=0.4)
        >>> result = scorer.score(seeker, candidate)
        >>> result.total_score, result.explanation
    """

    def __init__(self, hhc_weight: float = 0.6, factual_weight: float = 0.4):
        self.hhc_weight = hhc_weight
        self.factual_weight = factual_weight

    def score(
        self, seeker: UserProfile, candidate: UserProfile
    ) -> CompatibilityScore:
        """seeker 관점에서 candidate의 호환도 계산"""
        hhc_score = compatibility(seeker.vector, candidate.vector)

        veto_reason = find_veto_violation(
            seeker.preferences, candidate.factual
        )
        if veto_reason is not None:
            logger.debug(
                f"Veto violation: {seeker.user_id} -> {candidate.user_id} "
                f"({veto_reason})"
            )
            return CompatibilityScore(
                seeker_id=seeker.user_id,
                candidate_id=candidate.user_id,
                hhc_score=hhc_score,
                factual_score=0.0,
                veto_factor=0,
                total_score=0.0,
                confidence=0.0,
                explanation=VETO_EXPLANATION,
                breakdown=ScoreBreakdown(
                    personality_alignment=hhc_score,
                    veto_violation=True,
                    veto_reason=veto_reason,
                ),
            )

        factual_score, components, skipped = self._factual_score(
            seeker, candidate
        )
        total = self.hhc_weight * hhc_score + self.factual_weight * factual_score
        total = min(1.0, max(0.0, total))

        return CompatibilityScore(
            seeker_id=seeker.user_id,
            candidate_id=candidate.user_id,
            hhc_score=hhc_score,
            factual_score=factual_score,
            veto_factor=1,
            total_score=total,
            confidence=self._confidence(seeker, candidate, len(skipped)),
            explanation=explanation_for(total),
            breakdown=ScoreBreakdown(
                personality_alignment=hhc_score,
                factual_alignment=factual_score,
                interest_overlap=components.get("interests", 0.0),
                components=components,
                skipped_components=skipped,
            ),
        )

    def passes_veto(self, seeker: UserProfile, candidate: UserProfile) -> bool:
        return (
            find_veto_violation(seeker.preferences, candidate.factual) is None
        )

    def _factual_score(
        self, seeker: UserProfile, candidate: UserProfile
    ) -> tuple[float, dict[str, float], list[str]]:
        """사실 점수, 항목별 점수, 건너뛴 항목 목록

        양쪽 중 한쪽이라도 값이 없는 항목은 점수와 가중치 모두에서
        빠집니다. 사용할 수 있는 항목이 하나도 없으면 중립값 0.5입니다.
        """
        prefs = seeker.preferences
        mine = seeker.factual
        theirs = candidate.factual

        raw: dict[str, Optional[float]] = {
            "age": (
                age_compatibility(prefs.desired_age_range, theirs.age)
                if prefs.desired_age_range is not None
                and theirs.age is not None
                else None
            ),
            "height": (
                height_compatibility(
                    prefs.desired_partner_height, theirs.height_cm
                )
                if prefs.desired_partner_height is not None
                and theirs.height_cm is not None
                else None
            ),
            "relationship_goal": (
                accepted_set_match(
                    prefs.relationship_goal, theirs.relationship_goal
                )
                if prefs.relationship_goal and theirs.relationship_goal
                else None
            ),
            "family_plans": (
                accepted_set_match(prefs.family_plans, theirs.family_plans)
                if prefs.family_plans and theirs.family_plans
                else None
            ),
            "interests": (
                interest_overlap(
                    mine.interests,
                    theirs.interests,
                    prefs.interest_preference_weights,
                )
                if mine.interests and theirs.interests
                else None
            ),
            "lifestyle": lifestyle_match(mine, theirs),
            "communication_style": (
                accepted_set_match(
                    [mine.communication_style], theirs.communication_style
                )
                if mine.communication_style and theirs.communication_style
                else None
            ),
        }

        components = {k: v for k, v in raw.items() if v is not None}
        skipped = [k for k, v in raw.items() if v is None]

        weighted_sum = 0.0
        weight_used = 0.0
        for name, value in components.items():
            weight = seeker.weights.get(COMPONENT_ATTRIBUTES[name])
            weighted_sum += weight * value
            weight_used += weight

        if weight_used <= 0:
            return NEUTRAL_FACTUAL_SCORE, components, skipped
        return weighted_sum / weight_used, components, skipped

    @staticmethod
    def _confidence(
        seeker: UserProfile, candidate: UserProfile, skipped_count: int
    ) -> float:
        """프로필 완성도 평균 + 학습 깊이 보너스 - 건너뛴 항목 감점"""
        completeness = (seeker.completeness + candidate.completeness) / 2
        depth_bonus = seeker.total_interactions / INTERACTION_DEPTH_DIVISOR
        confidence = min(1.0, completeness + depth_bonus)
        confidence -= SKIPPED_COMPONENT_PENALTY * skipped_count
        return min(1.0, max(0.0, confidence))
