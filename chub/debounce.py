import asyncio
import itertools
from typing import Hashable

SEARCH_DEBOUNCE = 0.6  # 키 입력 검색 최소 간격 (초)


class Debouncer:
    """입력이 멈출 때까지 대기 (키별로 마지막 호출만 통과)"""

    def __init__(self, wait: float = SEARCH_DEBOUNCE):
        self.wait = wait
        self._counter = itertools.count(1)
        self._latest: dict[Hashable, int] = {}

    async def settle(self, key: Hashable = None) -> bool:
        """대기 후 그 사이 새 호출이 없었으면 True"""
        ticket = next(self._counter)
        self._latest[key] = ticket
        await asyncio.sleep(self.wait)
        if self._latest.get(key) != ticket:
            return False
        del self._latest[key]
        return True

    def cancel(self, key: Hashable = None):
        """즉시 실행되는 검색이 대기 중인 호출을 무효화"""
        self._latest.pop(key, None)
