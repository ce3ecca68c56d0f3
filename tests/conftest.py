"""테스트 설정"""

import os
import random
from typing import Generator

import pytest
import pytest_asyncio
from docker import from_env
from docker.errors import DockerException
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer

from soulmatch.core.config import Settings, settings
from soulmatch.core.database import Base
from soulmatch.core.dependencies import get_engine
from soulmatch.core.persistence import PersistenceWriter
from soulmatch.core.store import InMemoryKeyValueStore
from soulmatch.domains.profiles.models import (
    FactualProfile,
    PartnerPreferences,
    UserProfile,
)
from soulmatch.engine import MatchmakingEngine
from soulmatch.main import app


def _is_docker_available() -> bool:
    """로컬 환경에서 Docker 접근 가능 여부 확인"""
    if os.getenv("FORCE_DOCKER_TESTS", "").lower() in {"1", "true"}:
        return True
    if os.getenv("SKIP_DOCKER_TESTS", "").lower() in {"1", "true"}:
        return False

    try:
        client = from_env()
        client.ping()
        return True
    except DockerException:
        return False
    except Exception:
        return False


DOCKER_AVAILABLE = _is_docker_available()


@pytest.fixture
def profile_factory():
    """UserProfile 생성 헬퍼

    factual 키워드는 FactualProfile 필드로, preferences는 dict 또는
    PartnerPreferences로 받습니다.
    """

    def _factory(
        user_id: str,
        signature: str = "#808080",
        preferences=None,
        **factual,
    ) -> UserProfile:
        if isinstance(preferences, dict):
            preferences = PartnerPreferences(**preferences)
        return UserProfile(
            user_id=user_id,
            signature=signature,
            factual=FactualProfile(**factual),
            preferences=preferences or PartnerPreferences(),
        )

    return _factory


@pytest.fixture
def test_settings() -> Settings:
    """메모리 저장소를 사용하는 테스트 설정"""
    return Settings(
        store_backend="memory",
        trigger_seed=42,
        persistence_retry_delay=0.0,
    )


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    """메모리 키/값 저장소"""
    return InMemoryKeyValueStore()


@pytest.fixture
def writer(memory_store) -> PersistenceWriter:
    """메모리 저장소용 영속화 작성기"""
    return PersistenceWriter(memory_store, max_retries=1, retry_delay=0.0)


# NOTE:
# pytest-asyncio는 테스트마다 독립적인 event loop를 생성
# session 스코프 async fixture는 ScopeMismatch 에러를 유발할 수 있으므로
# async fixture는 모두 function 스코프로 유지
@pytest_asyncio.fixture
async def engine(test_settings, memory_store):
    """초기화된 매칭 엔진 (메모리 저장소, 고정 시드)"""
    matchmaking = MatchmakingEngine(
        test_settings, store=memory_store, rng=random.Random(7)
    ).initialize()
    yield matchmaking
    await matchmaking.close()


@pytest_asyncio.fixture
async def client(engine):
    """비동기 테스트 클라이언트 (테스트 엔진 주입)"""
    app.dependency_overrides[get_engine] = lambda: engine

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as client:
        yield client

    # 정리
    app.dependency_overrides.clear()


@pytest.fixture
def api_key_header():
    """Internal API Key 헤더"""
    return {"X-Internal-Api-Key": settings.internal_api_key}


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """PostgreSQL 테스트 컨테이너"""
    if not DOCKER_AVAILABLE:
        pytest.skip("Docker is not available; skipping container-based tests.")

    with PostgresContainer("postgres:16") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def test_database_url(postgres_container: PostgresContainer) -> str:
    """테스트 데이터베이스 URL"""
    # asyncpg를 위한 URL 생성
    return str(
        postgres_container.get_connection_url().replace(
            "postgresql+psycopg2://", "postgresql+asyncpg://"
        )
    )


@pytest_asyncio.fixture
async def session_factory(test_database_url: str):
    """깨끗한 스키마의 테스트 세션 팩토리"""
    db_engine = create_async_engine(test_database_url, echo=False)

    # 각 테스트마다 깨끗한 스키마 유지
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    yield factory

    await db_engine.dispose()
