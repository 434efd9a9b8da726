from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .models import CharacterRecord, SearchOptions


@dataclass
class SearchSession:
    """검색 팝업 하나의 화면 상태

    results는 검색마다 통째로 교체된다.
    generation은 가장 최근 요청 번호이며, 더 늦게 시작한 검색이 있으면 이전 응답은 버린다.
    """

    results: list[CharacterRecord] = field(default_factory=list)
    options: Optional[SearchOptions] = None
    generation: int = 0
    searched: bool = False
    in_flight: int = 0

    @property
    def searching(self) -> bool:
        return self.in_flight > 0

    def begin(self) -> int:
        """새 요청 번호 발급 + 기존 결과 비우기"""
        self.generation += 1
        self.results = []
        return self.generation

    def is_current(self, ticket: int) -> bool:
        return ticket == self.generation

    @contextmanager
    def mark_searching(self) -> Iterator[None]:
        self.in_flight += 1
        try:
            yield
        finally:
            self.in_flight -= 1

    def publish(self, ticket: int, records: list[CharacterRecord], options: Optional[SearchOptions] = None) -> bool:
        if not self.is_current(ticket):
            return False
        self.results = list(records)
        self.options = options
        self.searched = True
        return True

    def find(self, full_path: str) -> Optional[CharacterRecord]:
        for record in self.results:
            if record.full_path == full_path:
                return record
        return None

    def clear(self):
        """팝업 닫힘"""
        self.results = []
        self.options = None
        self.searched = False
