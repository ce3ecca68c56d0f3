"""CompatibilityScorer 단위 테스트"""

import math
from unittest.mock import MagicMock, patch

import pytest

from soulmatch.domains.compatibility.scorer import (
    EXPLANATION_BANDS,
    LIMITED_EXPLANATION,
    NEUTRAL_FACTUAL_SCORE,
    CompatibilityScorer,
    accepted_set_match,
    age_compatibility,
    explanation_for,
    find_veto_violation,
    height_compatibility,
    interest_overlap,
    lifestyle_match,
)
from soulmatch.domains.compatibility.service import CompatibilityService
from soulmatch.domains.compatibility.types import VETO_EXPLANATION
from soulmatch.domains.profiles.models import (
    FactualProfile,
    PartnerPreferences,
    PreferenceAttribute,
    ValueRange,
)


@pytest.fixture
def scorer():
    """기본 가중치(0.6/0.4) 계산기"""
    return CompatibilityScorer(hhc_weight=0.6, factual_weight=0.4)


class TestComponentFunctions:
    """항목별 점수 함수 테스트"""

    def test_age_inside_range(self):
        """범위 안 나이는 1.0"""
        desired = ValueRange(min=25, max=35)

        assert age_compatibility(desired, 25) == 1.0
        assert age_compatibility(desired, 35) == 1.0

    def test_age_outside_range_strictly_decreasing(self):
        """범위 밖에서는 멀어질수록 엄격히 감소"""
        desired = ValueRange(min=25, max=35)

        scores = [age_compatibility(desired, age) for age in (36, 38, 40, 45)]

        assert all(1.0 > s > 0.0 for s in scores)
        assert scores == sorted(scores, reverse=True)
        assert len(set(scores)) == len(scores)
        # sigma = 2.5, center = 30
        assert scores[0] == pytest.approx(math.exp(-36 / 12.5))

    def test_age_zero_width_range(self):
        """폭이 0인 범위 밖은 0.0"""
        desired = ValueRange(min=30, max=30)

        assert age_compatibility(desired, 30) == 1.0
        assert age_compatibility(desired, 31) == 0.0

    def test_height_linear_decay(self):
        """범위 밖 키는 20cm에 걸쳐 선형 감쇠"""
        desired = ValueRange(min=160, max=180)

        assert height_compatibility(desired, 170) == 1.0
        assert height_compatibility(desired, 190) == pytest.approx(0.5)
        assert height_compatibility(desired, 150) == pytest.approx(0.5)
        assert height_compatibility(desired, 205) == 0.0

    def test_accepted_set_match_case_insensitive(self):
        """허용 집합 비교는 대소문자 무관"""
        assert accepted_set_match(["Long-term"], "long-term ") == 1.0
        assert accepted_set_match(["Long-term"], "casual") == 0.0

    def test_interest_overlap_jaccard(self):
        """자카드 유사도"""
        score = interest_overlap(["Hiking", "Art"], ["hiking", "Music"])

        assert score == pytest.approx(1 / 3)

    def test_interest_overlap_weighted(self):
        """선호 가중치가 있으면 가중 자카드"""
        score = interest_overlap(
            ["Hiking", "Art"], ["hiking", "Music"], {"Hiking": 2.0}
        )

        assert score == pytest.approx(2 / 4)

    def test_interest_overlap_empty(self):
        """양쪽 모두 비어 있으면 0"""
        assert interest_overlap([], []) == 0.0

    def test_lifestyle_match_uses_shared_fields_only(self):
        """양쪽 모두 값이 있는 생활습관 항목만 비교"""
        mine = FactualProfile(
            exercise_habits="Daily", sleeping_habits="early bird"
        )
        theirs = FactualProfile(
            exercise_habits="daily",
            sleeping_habits="night owl",
            dietary_preferences="vegan",
        )

        assert lifestyle_match(mine, theirs) == pytest.approx(0.5)
        assert lifestyle_match(FactualProfile(), theirs) is None

    @pytest.mark.parametrize(
        "total, expected",
        [
            (0.95, EXPLANATION_BANDS[0][1]),
            (0.8, EXPLANATION_BANDS[0][1]),
            (0.6, EXPLANATION_BANDS[1][1]),
            (0.45, EXPLANATION_BANDS[2][1]),
            (0.39, LIMITED_EXPLANATION),
        ],
    )
    def test_explanation_bands(self, total, expected):
        """총점 구간별 설명"""
        assert explanation_for(total) == expected


class TestVeto:
    """필수 조건(veto) 테스트"""

    @pytest.mark.parametrize(
        "preferences, candidate, reason",
        [
            (
                {"desired_age_range": ValueRange(min=25, max=30)},
                {"age": 40},
                "age_range",
            ),
            (
                {"interested_in_genders": ["woman"]},
                {"gender_identity": "Man"},
                "gender",
            ),
            (
                {"desired_partner_height": ValueRange(min=170, max=190)},
                {"height_cm": 160},
                "height_range",
            ),
            (
                {"veto_criteria": {"non_smoker_only": True}},
                {"smoking_habits": "socially"},
                "non_smoker_only",
            ),
            (
                {"veto_criteria": {"non_smoker_only": True}},
                {},
                "non_smoker_only",
            ),
            (
                {"veto_criteria": {"must_want_children": True}},
                {"family_plans": "not sure"},
                "must_want_children",
            ),
            (
                {"veto_criteria": {"must_not_have_children": True}},
                {"family_plans": "has children"},
                "must_not_have_children",
            ),
            (
                {"veto_criteria": {"minimum_age": 30}},
                {"age": 29},
                "minimum_age",
            ),
            (
                {"veto_criteria": {"maximum_age": 30}},
                {"age": 31},
                "maximum_age",
            ),
            (
                {"veto_criteria": {"deal_breaker_interests": ["Hunting"]}},
                {"interests": ["hunting", "Art"]},
                "deal_breaker_interests",
            ),
            (
                {"veto_criteria": {"required_interests": ["Travel"]}},
                {"interests": ["Art"]},
                "required_interests",
            ),
        ],
    )
    def test_veto_reasons(self, preferences, candidate, reason):
        """위반 항목 이름 반환"""
        violation = find_veto_violation(
            PartnerPreferences(**preferences), FactualProfile(**candidate)
        )

        assert violation == reason

    def test_first_violation_wins(self):
        """여러 조건을 어기면 검사 순서상 첫 위반"""
        preferences = PartnerPreferences(
            desired_age_range=ValueRange(min=25, max=30),
            veto_criteria={"non_smoker_only": True},
        )

        violation = find_veto_violation(
            preferences, FactualProfile(age=40, smoking_habits="daily")
        )

        assert violation == "age_range"

    def test_missing_candidate_values_pass_range_checks(self):
        """후보 값이 없으면 범위 조건은 검사하지 않음"""
        preferences = PartnerPreferences(
            desired_age_range=ValueRange(min=25, max=30),
            interested_in_genders=["woman"],
            veto_criteria={"minimum_age": 25, "maximum_age": 30},
        )

        assert find_veto_violation(preferences, FactualProfile()) is None

    def test_satisfied_criteria(self):
        """조건을 모두 만족하면 None"""
        preferences = PartnerPreferences(
            veto_criteria={
                "non_smoker_only": True,
                "must_want_children": True,
                "required_interests": ["Travel"],
            }
        )
        candidate = FactualProfile(
            smoking_habits="Never",
            family_plans="Wants Children",
            interests=["travel", "Food"],
        )

        assert find_veto_violation(preferences, candidate) is None

    def test_vetoed_score_is_zero(self, scorer, profile_factory):
        """veto 위반이면 총점 0, 사실 점수는 계산하지 않음"""
        # Given
        seeker = profile_factory(
            "seeker", preferences={"veto_criteria": {"non_smoker_only": True}}
        )
        candidate = profile_factory("candidate", smoking_habits="daily")

        # When
        with patch.object(
            CompatibilityScorer, "_factual_score"
        ) as mock_factual:
            result = scorer.score(seeker, candidate)

        # Then
        mock_factual.assert_not_called()
        assert result.total_score == 0.0
        assert result.veto_factor == 0
        assert result.is_vetoed
        assert result.explanation == VETO_EXPLANATION
        assert result.breakdown.veto_reason == "non_smoker_only"
        assert result.hhc_score == 1.0
        assert not scorer.passes_veto(seeker, candidate)


class TestCompatibilityScorer:
    """하이브리드 점수 테스트"""

    def test_no_factual_data_uses_neutral_score(self, scorer, profile_factory):
        """사용할 사실 항목이 없으면 중립 사실 점수"""
        # Given
        seeker = profile_factory("seeker")
        candidate = profile_factory("candidate")

        # When
        result = scorer.score(seeker, candidate)

        # Then
        assert result.factual_score == NEUTRAL_FACTUAL_SCORE
        assert result.total_score == pytest.approx(0.6 + 0.4 * 0.5)
        assert len(result.breakdown.skipped_components) == 7
        assert result.breakdown.components == {}
        assert result.confidence == 0.0

    def test_total_combines_personality_and_factual(
        self, scorer, profile_factory
    ):
        """총점 = 0.6 * hhc + 0.4 * factual"""
        # Given
        seeker = profile_factory(
            "seeker",
            signature="#000000",
            preferences={"desired_age_range": ValueRange(min=25, max=35)},
            interests=["Hiking", "Art"],
        )
        candidate = profile_factory(
            "candidate",
            signature="#00FFFF",
            age=30,
            interests=["hiking", "Music"],
        )

        # When
        result = scorer.score(seeker, candidate)

        # Then
        weights = seeker.weights
        age_w = weights.get(PreferenceAttribute.AGE)
        interest_w = weights.get(PreferenceAttribute.INTERESTS)
        expected_factual = (age_w * 1.0 + interest_w * (1 / 3)) / (
            age_w + interest_w
        )
        assert result.hhc_score == pytest.approx(1 - math.sqrt(2) / math.sqrt(3))
        assert result.factual_score == pytest.approx(expected_factual)
        assert result.total_score == pytest.approx(
            0.6 * result.hhc_score + 0.4 * expected_factual
        )
        assert result.breakdown.components["age"] == 1.0
        assert result.breakdown.interest_overlap == pytest.approx(1 / 3)
        assert "height" in result.breakdown.skipped_components
        assert 0.0 <= result.total_score <= 1.0

    def test_weighted_by_seeker_preferences(self, scorer, profile_factory):
        """사실 점수는 seeker의 선호 가중치로 가중"""
        # Given
        seeker = profile_factory(
            "seeker",
            preferences={
                "desired_age_range": ValueRange(min=25, max=35),
                "relationship_goal": ["long-term"],
            },
        )
        candidate = profile_factory(
            "candidate", age=30, relationship_goal="casual"
        )
        weights = seeker.weights.adjusted(
            PreferenceAttribute.RELATIONSHIP_GOAL, 1.0
        )
        heavier_goal = seeker.model_copy(update={"weights": weights})

        # When
        base = scorer.score(seeker, candidate)
        shifted = scorer.score(heavier_goal, candidate)

        # Then
        assert base.breakdown.components == {
            "age": 1.0,
            "relationship_goal": 0.0,
        }
        assert shifted.factual_score < base.factual_score

    def test_confidence_penalized_per_skipped_component(
        self, scorer, profile_factory
    ):
        """건너뛴 항목마다 신뢰도 0.05 감소"""
        seeker = profile_factory("seeker").model_copy(
            update={"total_interactions": 50}
        )
        candidate = profile_factory("candidate")

        assert scorer._confidence(seeker, candidate, 0) == pytest.approx(0.5)
        assert scorer._confidence(seeker, candidate, 2) == pytest.approx(0.4)
        assert scorer._confidence(seeker, candidate, 20) == 0.0

    def test_score_is_directional(self, scorer, profile_factory):
        """점수는 seeker 관점 (선호가 다르면 비대칭)"""
        a = profile_factory(
            "a",
            age=40,
            preferences={"desired_age_range": ValueRange(min=25, max=30)},
        )
        b = profile_factory("b", age=28)

        a_to_b = scorer.score(a, b)
        b_to_a = scorer.score(b, a)

        assert a_to_b.factual_score == 1.0
        assert b_to_a.factual_score == NEUTRAL_FACTUAL_SCORE
        assert a_to_b.total_score == pytest.approx(1.0)
        assert b_to_a.total_score == pytest.approx(0.8)


class TestRankCandidates:
    """CompatibilityService.rank_candidates 테스트"""

    def test_rank_excludes_seeker_and_vetoed(self, scorer, profile_factory):
        """자기 자신과 veto 위반 후보 제외, 총점 내림차순"""
        # Given
        service = CompatibilityService(MagicMock(), scorer)
        seeker = profile_factory(
            "seeker",
            signature="#808080",
            preferences={"veto_criteria": {"maximum_age": 35}},
        )
        close = profile_factory("close", signature="#808080", age=30)
        far = profile_factory("far", signature="#00FFFF", age=30)
        vetoed = profile_factory("vetoed", signature="#808080", age=50)

        # When
        ranked = service.rank_candidates(seeker, [far, seeker, vetoed, close])

        # Then
        assert [s.candidate_id for s in ranked] == ["close", "far"]
        assert ranked[0].total_score > ranked[1].total_score

    def test_rank_is_stable_for_ties(self, scorer, profile_factory):
        """동점 후보는 입력 순서 유지"""
        service = CompatibilityService(MagicMock(), scorer)
        seeker = profile_factory("seeker")
        first = profile_factory("first")
        second = profile_factory("second")

        ranked = service.rank_candidates(seeker, [second, first])

        assert [s.candidate_id for s in ranked] == ["second", "first"]
