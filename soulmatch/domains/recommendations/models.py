"""Recommendations 도메인 모델

사용자별 추천 큐 상태(큐, 제공 이력, 상호작용 기록)를 하나의 레코드로
묶어 한 개의 락으로 갱신합니다.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from soulmatch.core.utils.datetime import format_iso, now_utc, parse_iso
from soulmatch.domains.compatibility.types import CompatibilityScore
from soulmatch.domains.profiles.models import UserProfile

CONTEXT_MAX_LENGTH = 100


class InteractionAction(str, Enum):
    """추천 후보에 대한 사용자 결정"""

    LIKE = "like"
    PASS = "pass"


class QueueEntry(BaseModel):
    """큐에 들어간 추천 후보 (생성 시점의 스냅샷)"""

    model_config = ConfigDict(frozen=True)

    candidate_id: str
    name: str
    age: Optional[int] = None
    signature: str
    compatibility_score: float = Field(..., ge=0.0, le=1.0)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    explanation: str = ""
    interests: list[str] = Field(default_factory=list)

    @classmethod
    def from_score(
        cls, candidate: UserProfile, score: CompatibilityScore
    ) -> "QueueEntry":
        return cls(
            candidate_id=candidate.user_id,
            name=candidate.name,
            age=candidate.factual.age,
            signature=candidate.signature,
            compatibility_score=score.total_score,
            confidence=score.confidence,
            explanation=score.explanation,
            interests=candidate.factual.interests or [],
        )


class InteractionRecord(BaseModel):
    """(사용자, 후보) 쌍의 최신 결정과 직전 결정 한 단계"""

    model_config = ConfigDict(frozen=True)

    action: InteractionAction
    timestamp: datetime = Field(default_factory=now_utc)
    context: str = Field(default="", max_length=CONTEXT_MAX_LENGTH)
    previous_action: Optional[InteractionAction] = None
    changed_mind: bool = False

    @classmethod
    def follow(
        cls,
        previous: Optional["InteractionRecord"],
        action: InteractionAction,
        context: Optional[str] = None,
    ) -> "InteractionRecord":
        """직전 기록을 이어받은 새 기록

        직전 결정과 반대 방향이면 changed_mind=True 입니다.
        """
        previous_action = previous.action if previous is not None else None
        return cls(
            action=action,
            context=(context or "")[:CONTEXT_MAX_LENGTH],
            previous_action=previous_action,
            changed_mind=(
                previous_action is not None and previous_action != action
            ),
        )


@dataclass
class UserQueueState:
    """사용자 한 명의 추천 큐 상태

    entries, served, interactions, last_populated 는 항상 lock 을 잡고
    함께 갱신합니다. populating 과 population_done 은 중복 채우기를 막는
    런타임 플래그로 저장되지 않습니다.
    """

    user_id: str
    entries: list[QueueEntry] = field(default_factory=list)
    served: dict[str, datetime] = field(default_factory=dict)
    interactions: dict[str, InteractionRecord] = field(default_factory=dict)
    last_populated: Optional[datetime] = None
    degraded: bool = False
    lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, repr=False, compare=False
    )
    populating: bool = False
    population_done: asyncio.Event = field(
        default_factory=asyncio.Event, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self.population_done.set()

    def snapshot(self) -> dict[str, Any]:
        """저장소에 기록할 JSON 문서"""
        return {
            "user_id": self.user_id,
            "entries": [e.model_dump(mode="json") for e in self.entries],
            "served": {
                cid: format_iso(at) for cid, at in self.served.items()
            },
            "interactions": {
                cid: record.model_dump(mode="json")
                for cid, record in self.interactions.items()
            },
            "last_populated": (
                format_iso(self.last_populated)
                if self.last_populated
                else None
            ),
            "degraded": self.degraded,
        }

    @classmethod
    def restore(cls, document: dict[str, Any]) -> "UserQueueState":
        """snapshot() 문서로부터 상태 복원"""
        served = {}
        for cid, at in document.get("served", {}).items():
            served[cid] = parse_iso(at) or now_utc()
        return cls(
            user_id=document["user_id"],
            entries=[
                QueueEntry.model_validate(e)
                for e in document.get("entries", [])
            ],
            served=served,
            interactions={
                cid: InteractionRecord.model_validate(record)
                for cid, record in document.get("interactions", {}).items()
            },
            last_populated=parse_iso(document.get("last_populated")),
            degraded=document.get("degraded", False),
        )
