"""검색 세션/디바운스 테스트"""

import asyncio

import pytest

from chub import Debouncer, SearchSession, normalize_response

from .conftest import make_nodes


class TestSearchSession:
    def test_begin_clears_results(self, session):
        """새 요청은 기존 결과를 비움"""
        ticket = session.begin()
        session.publish(ticket, normalize_response({"nodes": make_nodes(2)}))

        session.begin()

        assert session.results == []

    def test_stale_ticket_not_published(self, session):
        """늦게 도착한 이전 응답은 무시"""
        old = session.begin()
        new = session.begin()

        assert session.publish(new, normalize_response({"nodes": make_nodes(1)})) is True
        assert session.publish(old, normalize_response({"nodes": make_nodes(3)})) is False
        assert len(session.results) == 1

    def test_searching_counter(self, session):
        """겹친 검색이 끝날 때까지 검색 중 표시 유지"""
        with session.mark_searching():
            with session.mark_searching():
                assert session.searching
            assert session.searching
        assert not session.searching

    def test_searching_cleared_on_error(self, session):
        """예외가 나도 검색 중 표시 해제"""
        with pytest.raises(RuntimeError):
            with session.mark_searching():
                raise RuntimeError("fail")

        assert session.in_flight == 0

    def test_find_and_clear(self, session):
        ticket = session.begin()
        session.publish(ticket, normalize_response({"nodes": make_nodes(2)}))

        assert session.find("alice/char-1").name == "Character 1"
        assert session.find("nobody/none") is None

        session.clear()

        assert session.results == []
        assert session.searched is False


class TestDebouncer:
    @pytest.mark.asyncio
    async def test_only_last_call_passes(self):
        """연속 호출 중 마지막만 통과"""
        debouncer = Debouncer(wait=0.05)

        first = asyncio.create_task(debouncer.settle("k"))
        await asyncio.sleep(0.01)
        second = asyncio.create_task(debouncer.settle("k"))

        assert await first is False
        assert await second is True

    @pytest.mark.asyncio
    async def test_keys_independent(self):
        """키가 다르면 서로 영향 없음"""
        debouncer = Debouncer(wait=0.02)

        results = await asyncio.gather(debouncer.settle("a"), debouncer.settle("b"))

        assert results == [True, True]

    @pytest.mark.asyncio
    async def test_cancel(self):
        """즉시 검색이 대기 중 호출을 무효화"""
        debouncer = Debouncer(wait=0.05)

        pending = asyncio.create_task(debouncer.settle("k"))
        await asyncio.sleep(0.01)
        debouncer.cancel("k")

        assert await pending is False
