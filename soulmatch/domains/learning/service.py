"""선호 학습 서비스

사용자의 반응(positive/neutral/negative)을 인력/척력으로 바꿔 해당 속성의
가중치를 조정하고, 매 갱신 후 전체 가중치를 재정규화합니다.

    delta = learning_rate * (attraction - repulsion)
    weight = clamp(weight + delta, 0, 1)  →  전체 벡터 합이 1이 되도록 재조정
"""

from typing import Optional, Union

from soulmatch.core.concurrency import UserLockRegistry
from soulmatch.core.context import get_request_id
from soulmatch.core.logging import get_logger
from soulmatch.domains.learning.exceptions import (
    InvalidAttributeException,
    InvalidReactionException,
)
from soulmatch.domains.profiles.models import (
    InteractionSignal,
    PreferenceAttribute,
    Reaction,
    UserProfile,
)
from soulmatch.domains.profiles.service import ProfileService

logger = get_logger(__name__)

ATTRACTION_FORCES: dict[Reaction, float] = {
    Reaction.POSITIVE: 0.2,
    Reaction.NEUTRAL: 0.05,
    Reaction.NEGATIVE: 0.0,
}
REPULSION_FORCES: dict[Reaction, float] = {
    Reaction.POSITIVE: 0.0,
    Reaction.NEUTRAL: 0.0,
    Reaction.NEGATIVE: 0.15,
}

QUESTION_TEMPLATES: dict[PreferenceAttribute, str] = {
    PreferenceAttribute.AGE: "What age range feels right for you?",
    PreferenceAttribute.HEIGHT: "Do you have height preferences?",
    PreferenceAttribute.INTERESTS: (
        "What hobbies or interests caught your attention?"
    ),
    PreferenceAttribute.FAMILY_PLANS: "Are family plans important to you?",
    PreferenceAttribute.LIFESTYLE: (
        "How important is lifestyle compatibility?"
    ),
}

QUESTIONABLE_ATTRIBUTES: tuple[PreferenceAttribute, ...] = tuple(
    a for a in PreferenceAttribute if a is not PreferenceAttribute.CUSTOM
)


def parse_attribute(
    attribute: Union[str, PreferenceAttribute]
) -> PreferenceAttribute:
    """문자열을 PreferenceAttribute로 변환

    Raises:
        InvalidAttributeException: 알 수 없는 속성인 경우
    """
    try:
        return PreferenceAttribute(attribute)
    except ValueError:
        raise InvalidAttributeException(str(attribute))


def parse_reaction(reaction: Union[str, Reaction]) -> Reaction:
    """문자열을 Reaction으로 변환

    Raises:
        InvalidReactionException: 알 수 없는 반응인 경우
    """
    try:
        return Reaction(reaction)
    except ValueError:
        raise InvalidReactionException(str(reaction))


def generate_question(attribute: PreferenceAttribute) -> str:
    """속성에 대한 후속 질문 문구"""
    template = QUESTION_TEMPLATES.get(attribute)
    if template is not None:
        return template
    return f"Tell me about your preferences for {attribute.value}"


class LearningService:
    """상호작용 신호 기반 선호 가중치 학습 서비스"""

    def __init__(
        self,
        profiles: ProfileService,
        locks: UserLockRegistry,
        learning_rate: float = 0.1,
        low_confidence_threshold: float = 0.3,
        signal_confidence: float = 0.7,
    ):
        self.profiles = profiles
        self.locks = locks
        self.learning_rate = learning_rate
        self.low_confidence_threshold = low_confidence_threshold
        self.signal_confidence = signal_confidence

    async def record_interaction_signal(
        self,
        user_id: str,
        candidate_id: str,
        attribute: Union[str, PreferenceAttribute],
        reaction: Union[str, Reaction],
    ) -> UserProfile:
        """반응 하나를 반영해 가중치를 갱신한 프로필 반환

        새 신호는 반환된 프로필의 interaction_history 마지막 항목입니다.

        Args:
            user_id: 사용자 ID
            candidate_id: 반응 대상 후보 ID
            attribute: 반응이 가리키는 선호 속성
            reaction: positive / neutral / negative

        Raises:
            ProfileNotFoundException: 프로필이 없는 경우
            InvalidAttributeException: 알 수 없는 속성인 경우
            InvalidReactionException: 알 수 없는 반응인 경우
        """
        attr = parse_attribute(attribute)
        react = parse_reaction(reaction)

        attraction = ATTRACTION_FORCES[react]
        repulsion = REPULSION_FORCES[react]
        delta = self.learning_rate * (attraction - repulsion)

        async with self.locks.lock_for(user_id):
            profile = await self.profiles.get_profile(user_id)

            signal = InteractionSignal(
                candidate_id=candidate_id,
                question=generate_question(attr),
                attribute=attr,
                reaction=react,
                attraction_force=attraction,
                repulsion_force=repulsion,
                confidence=self.signal_confidence,
            )
            questions = dict(profile.attribute_questions)
            questions[attr] = questions.get(attr, 0) + 1

            updated = self.profiles.save_profile(
                profile.model_copy(
                    update={
                        "weights": profile.weights.adjusted(attr, delta),
                        "interaction_history": [
                            *profile.interaction_history,
                            signal,
                        ],
                        "attribute_questions": questions,
                        "total_interactions": profile.total_interactions + 1,
                    }
                )
            )

        logger.info(
            "Preference weights updated",
            extra={
                "request_id": get_request_id(),
                "user_id": user_id,
                "attribute": attr.value,
                "reaction": react.value,
                "delta": round(delta, 4),
                "new_weight": round(updated.weights.get(attr), 4),
            },
        )
        return updated

    def select_next_question_attribute(
        self, profile: UserProfile
    ) -> PreferenceAttribute:
        """다음에 물어볼 속성 선택 (엄격한 우선순위)

        1. 한 번도 묻지 않은 속성
        2. 가중치가 low_confidence_threshold 미만인 속성
        3. 가장 가중치가 높은 속성
        """
        unexplored = self._first(
            lambda a: profile.explored_count(a) == 0
        )
        if unexplored is not None:
            return unexplored

        uncertain = self._first(
            lambda a: profile.weights.get(a) < self.low_confidence_threshold
        )
        if uncertain is not None:
            return uncertain

        return max(QUESTIONABLE_ATTRIBUTES, key=profile.weights.get)

    async def next_question(
        self, user_id: str
    ) -> tuple[PreferenceAttribute, str]:
        """사용자에게 다음에 던질 (속성, 질문)"""
        profile = await self.profiles.get_profile(user_id)
        attribute = self.select_next_question_attribute(profile)
        return attribute, generate_question(attribute)

    @staticmethod
    def _first(predicate) -> Optional[PreferenceAttribute]:
        return next(
            (a for a in QUESTIONABLE_ATTRIBUTES if predicate(a)), None
        )
