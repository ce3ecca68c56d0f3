"""백그라운드 영속화 작성기

메모리 상태 변경을 저장소에 fire-and-forget 방식으로 기록합니다.
어떤 예외로 실패하든 쓰기는 재시도 후 로그를 남기고 failed_writes 로
집계합니다. 이미 반영된 메모리 상태는 되돌리지 않습니다.
같은 키에 대한 쓰기는 예약된 순서대로 적용됩니다.
"""

import asyncio
from typing import Optional

from soulmatch.core.logging import get_logger
from soulmatch.core.store import JSONDocument, KeyValueStore

logger = get_logger(__name__)


class PersistenceWriter:
    """저장소 쓰기 스케줄러"""

    def __init__(
        self,
        store: KeyValueStore,
        max_retries: int = 2,
        retry_delay: float = 0.1,
    ):
        """
        Args:
            store: 대상 저장소
            max_retries: 최초 시도 이후 재시도 횟수
            retry_delay: 재시도 간 기본 대기 시간(초), 시도마다 선형 증가
        """
        self.store = store
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._tasks: set[asyncio.Task] = set()
        self._latest: dict[str, asyncio.Task] = {}
        self.failed_writes = 0

    def schedule_set(self, key: str, value: JSONDocument) -> asyncio.Task:
        """문서 저장 예약"""
        return self._schedule(key, value)

    def schedule_delete(self, key: str) -> asyncio.Task:
        """문서 삭제 예약"""
        return self._schedule(key, None)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """예약된 모든 쓰기가 끝날 때까지 대기"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _schedule(
        self, key: str, value: Optional[JSONDocument]
    ) -> asyncio.Task:
        previous = self._latest.get(key)
        task = asyncio.create_task(self._write(key, value, previous))
        self._tasks.add(task)
        self._latest[key] = task
        task.add_done_callback(lambda t: self._forget(key, t))
        return task

    def _forget(self, key: str, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if self._latest.get(key) is task:
            del self._latest[key]

    async def _write(
        self,
        key: str,
        value: Optional[JSONDocument],
        previous: Optional[asyncio.Task],
    ) -> None:
        if previous is not None:
            await asyncio.wait([previous])

        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                if value is None:
                    await self.store.delete(key)
                else:
                    await self.store.set(key, value)
                return
            except Exception as e:
                if attempt < attempts:
                    logger.warning(
                        f"Persistence write failed, retrying "
                        f"({attempt}/{self.max_retries}): {e}",
                        extra={"key": key},
                    )
                    await asyncio.sleep(self.retry_delay * attempt)
                    continue

                self.failed_writes += 1
                logger.error(
                    f"Persistence write dropped after {attempts} attempts: {e}",
                    extra={"key": key},
                )
