"""내구성 키/값 저장소

프로필, 선호 가중치, 추천 큐 스냅샷을 JSON 문서로 저장합니다.
키 규칙은 `{collection}:{user_id}` (예: `profile:u-1`, `queue:u-1`)입니다.

구현:
    - InMemoryKeyValueStore: 프로세스 메모리 (개발/테스트용)
    - DatabaseKeyValueStore: PostgreSQL `kv_entries` 테이블 (SQLAlchemy async)
"""

import copy
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, String, delete, func, select
from sqlalchemy.dialects.postgresql import JSONB, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Mapped, mapped_column

from soulmatch.core.config import Settings
from soulmatch.core.database import Base, async_session_maker
from soulmatch.core.exceptions import PersistenceException
from soulmatch.core.logging import get_logger

logger = get_logger(__name__)

JSONDocument = dict[str, Any]


def make_key(collection: str, user_id: str) -> str:
    """저장소 키 생성"""
    return f"{collection}:{user_id}"


class KeyValueEntry(Base):
    """키/값 저장소 레코드"""

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(
        String(255), primary_key=True, comment="컬렉션:사용자 ID"
    )
    value: Mapped[JSONDocument] = mapped_column(
        JSONB, nullable=False, comment="JSON 문서"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="마지막 저장 일시",
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntry(key={self.key}, updated_at={self.updated_at})>"


class KeyValueStore(ABC):
    """비동기 키/값 저장소 인터페이스"""

    @abstractmethod
    async def get(self, key: str) -> Optional[JSONDocument]:
        """키에 해당하는 문서 조회 (없으면 None)"""
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: JSONDocument) -> None:
        """문서 저장 (덮어쓰기)"""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:
        """문서 삭제 (없으면 무시)"""
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    """메모리 기반 저장소

    저장/조회 시 깊은 복사를 하여 호출자가 반환된 문서를 수정해도
    저장된 값이 바뀌지 않습니다.
    """

    def __init__(self) -> None:
        self._data: dict[str, JSONDocument] = {}

    async def get(self, key: str) -> Optional[JSONDocument]:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, key: str, value: JSONDocument) -> None:
        self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)


class DatabaseKeyValueStore(KeyValueStore):
    """PostgreSQL 기반 저장소

    모든 SQLAlchemy 오류는 PersistenceException으로 변환됩니다.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get(self, key: str) -> Optional[JSONDocument]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(KeyValueEntry.value).where(KeyValueEntry.key == key)
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceException(
                message="저장소 조회에 실패했습니다.",
                detail={"key": key, "reason": str(e)},
            ) from e

    async def set(self, key: str, value: JSONDocument) -> None:
        stmt = insert(KeyValueEntry).values(key=key, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[KeyValueEntry.key],
            set_={"value": stmt.excluded.value, "updated_at": func.now()},
        )
        try:
            async with self.session_factory() as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceException(
                message="저장소 쓰기에 실패했습니다.",
                detail={"key": key, "reason": str(e)},
            ) from e

    async def delete(self, key: str) -> None:
        try:
            async with self.session_factory() as session:
                await session.execute(
                    delete(KeyValueEntry).where(KeyValueEntry.key == key)
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceException(
                message="저장소 삭제에 실패했습니다.",
                detail={"key": key, "reason": str(e)},
            ) from e


def build_store(config: Settings) -> KeyValueStore:
    """설정에 맞는 저장소 생성

    Args:
        config: 애플리케이션 설정

    Returns:
        store_backend에 해당하는 KeyValueStore 구현
    """
    if config.uses_database:
        logger.info("Using database key/value store")
        return DatabaseKeyValueStore(async_session_maker)

    logger.info("Using in-memory key/value store")
    return InMemoryKeyValueStore()
