"""대화 중 추천 카드 노출 정책

사용자 메시지를 키워드 단계(tier)로 분류하고, 단계별 확률로 추천 노출
여부를 뽑습니다. 단계와 확률은 데이터로 두고 난수원은 주입받으므로
시드를 고정하면 결과가 결정적입니다.
"""

import random
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

RECOMMENDATION_TURN_TYPES = frozenset({"recommendation_card", "recommendation"})


@dataclass(frozen=True)
class TriggerTier:
    """키워드 단계 하나"""

    name: str
    probability: float
    keywords: tuple[str, ...]

    def matches(self, lowered_message: str) -> bool:
        return any(k in lowered_message for k in self.keywords)


DEFAULT_TRIGGER_TIERS: tuple[TriggerTier, ...] = (
    TriggerTier(
        "high",
        0.7,
        (
            "lonely",
            "single",
            "looking for someone",
            "want to meet",
            "ready to date",
            "find love",
            "relationship",
            "partner",
            "soulmate",
            "the one",
            "tired of being alone",
            "ready for love",
            "looking for connection",
        ),
    ),
    TriggerTier(
        "medium",
        0.4,
        (
            "i love",
            "i enjoy",
            "my passion",
            "i'm into",
            "favorite",
            "hobby",
            "interests",
            "what i like",
            "makes me happy",
            "personality",
            "who i am",
            "describe myself",
            "about me",
        ),
    ),
    TriggerTier(
        "process",
        0.3,
        (
            "how does this work",
            "how do you match",
            "find matches",
            "matching process",
            "algorithm",
            "compatibility",
            "what happens next",
            "how many people",
            "who will i meet",
        ),
    ),
    TriggerTier(
        "positive",
        0.25,
        (
            "that's interesting",
            "cool",
            "awesome",
            "great",
            "amazing",
            "i like that",
            "sounds good",
            "perfect",
            "exactly",
            "yes",
            "definitely",
            "absolutely",
            "for sure",
        ),
    ),
)

LONG_MESSAGE_PROBABILITY = 0.2
DEFAULT_PROBABILITY = 0.1

# (키워드, 문구) 앞에서부터 첫 일치
BRIDGE_MESSAGES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("lonely", "single"),
        "I understand that feeling. Actually, I think I have someone who "
        "could really brighten your day:",
    ),
    (
        ("looking for someone", "want to meet"),
        "Perfect timing! I've found someone who I think you'd really "
        "connect with:",
    ),
    (
        ("ready to date", "ready for love"),
        "That's wonderful to hear! I have someone in mind who might be "
        "exactly what you're looking for:",
    ),
    (
        ("i love", "i enjoy", "my passion"),
        "That's amazing! Speaking of shared interests, I know someone who "
        "has a similar passion:",
    ),
    (
        ("hobby", "favorite"),
        "I love learning about what makes you tick! Actually, I found "
        "someone with some fascinating hobbies too:",
    ),
    (
        ("how does this work", "matching process"),
        "Great question! Let me show you how it works with a real example. "
        "Here's someone I matched for you:",
    ),
    (
        ("compatibility", "algorithm"),
        "I analyze hundreds of compatibility factors! For instance, here's "
        "someone with great compatibility with you:",
    ),
    (
        ("awesome", "amazing", "great"),
        "I'm so glad you're excited! That positive energy reminds me of "
        "someone I think you'd love to meet:",
    ),
    (
        ("perfect", "exactly"),
        "Exactly! And speaking of perfect matches, I have someone who might "
        "be just that:",
    ),
)
LONG_MESSAGE_BRIDGE = (
    "Thank you for sharing so much about yourself! It helps me understand "
    "you better. Actually, based on what you've told me, I think you'd "
    "really connect with:"
)
DEFAULT_BRIDGE_MESSAGES: tuple[str, ...] = (
    "That's interesting! Speaking of connections, I found someone who might "
    "be a great match for you:",
    "I love our conversation! By the way, I have someone I think you'd "
    "really enjoy meeting:",
    "You know what? This reminds me of someone I think you'd have amazing "
    "chemistry with:",
    "Speaking of meaningful connections, I found someone who shares your "
    "perspective:",
    "That's wonderful to learn about you! I actually know someone with a "
    "similar outlook:",
)


def _turn_type(turn: Any) -> Optional[str]:
    if isinstance(turn, Mapping):
        return turn.get("type")
    return getattr(turn, "type", None)


class RecommendationTriggerPolicy:
    """추천 노출 여부 판단기

    Example:
        >>> policy = RecommendationTriggerPolicy(rng=random.Random(42))
        >>> policy.should_trigger("I'm so lonely", [], has_recommendations=True)
    """

    def __init__(
        self,
        tiers: Sequence[TriggerTier] = DEFAULT_TRIGGER_TIERS,
        cooldown_turns: int = 5,
        long_message_threshold: int = 100,
        long_message_probability: float = LONG_MESSAGE_PROBABILITY,
        default_probability: float = DEFAULT_PROBABILITY,
        rng: Optional[random.Random] = None,
    ):
        self.tiers = tuple(tiers)
        self.cooldown_turns = cooldown_turns
        self.long_message_threshold = long_message_threshold
        self.long_message_probability = long_message_probability
        self.default_probability = default_probability
        self.rng = rng or random.Random()

    def classify(self, message: str) -> tuple[str, float]:
        """메시지의 (단계 이름, 노출 확률)"""
        lowered = message.lower()
        for tier in self.tiers:
            if tier.matches(lowered):
                return tier.name, tier.probability
        if len(message) > self.long_message_threshold:
            return "long_message", self.long_message_probability
        return "default", self.default_probability

    def recently_recommended(self, recent_history: Sequence[Any]) -> bool:
        """최근 cooldown_turns 턴 안에 추천을 보여줬는지 여부"""
        if self.cooldown_turns <= 0:
            return False
        window = list(recent_history)[-self.cooldown_turns:]
        return any(
            _turn_type(turn) in RECOMMENDATION_TURN_TYPES for turn in window
        )

    def should_trigger(
        self,
        message: str,
        recent_history: Sequence[Any],
        has_recommendations: bool,
    ) -> bool:
        """이번 턴에 추천 카드를 보여줄지 결정

        Args:
            message: 현재 사용자 메시지
            recent_history: 최근 대화 턴 (각 항목의 type 필드를 확인)
            has_recommendations: 큐에 추천이 남아 있는지 여부
        """
        if not has_recommendations:
            return False
        if self.recently_recommended(recent_history):
            return False
        _, probability = self.classify(message or "")
        return self.rng.random() < probability

    def bridge_message(self, message: str) -> str:
        """추천 카드 앞에 붙일 대화 연결 문구"""
        lowered = (message or "").lower()
        for keywords, text in BRIDGE_MESSAGES:
            if any(k in lowered for k in keywords):
                return text
        if len(message or "") > self.long_message_threshold:
            return LONG_MESSAGE_BRIDGE
        return self.rng.choice(DEFAULT_BRIDGE_MESSAGES)
