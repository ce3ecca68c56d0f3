"""사용자 단위 동시성 제어

사용자별 상태 변경은 해당 사용자의 asyncio.Lock 아래에서만 일어납니다.
서로 다른 사용자 사이에는 전역 락이 필요 없습니다.
"""

import asyncio


class UserLockRegistry:
    """사용자 ID별 asyncio.Lock 레지스트리"""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def lock_for(self, user_id: str) -> asyncio.Lock:
        """사용자 락 반환 (없으면 생성)"""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

