"""검색 결과 HTML 렌더링 테스트"""

import pytest

from chub import CharacterRecord, CharacterSearch, SearchSession, normalize_response
from ui.render import (
    EMPTY_AFTER_SEARCH,
    EMPTY_BEFORE_SEARCH,
    MAX_CARD_TAGS,
    notice_text,
    render_card,
    render_results,
    render_search,
    result_choices,
)

from .conftest import make_nodes


def published(records) -> SearchSession:
    session = SearchSession()
    session.publish(session.begin(), records)
    return session


class TestRenderResults:
    def test_before_search(self):
        """검색 전 안내 문구"""
        assert EMPTY_BEFORE_SEARCH in render_results(SearchSession())

    def test_no_results(self):
        """검색 후 결과 없음"""
        assert EMPTY_AFTER_SEARCH in render_results(published([]))

    def test_cards_in_order(self):
        """결과 순서대로 카드 출력"""
        html = render_results(published(normalize_response({"nodes": make_nodes(3)})))

        positions = [html.index(f"alice/char-{i}") for i in range(3)]
        assert positions == sorted(positions)
        assert html.count('class="chub-card"') == 3

    def test_searching_class(self):
        """검색 중 표시"""
        session = SearchSession()
        with session.mark_searching():
            assert "chub-list searching" in render_results(session)
        assert "searching" not in render_results(session)


class TestRenderCard:
    def test_escapes_text(self):
        """이름/설명은 HTML 이스케이프"""
        record = CharacterRecord(full_path="eve/x", name="<script>alert(1)</script>", description="a & b")

        html = render_card(record)

        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "a &amp; b" in html

    def test_placeholder_image(self):
        """이미지가 없으면 빈 썸네일"""
        html = render_card(CharacterRecord(full_path="eve/x"))

        assert "chub-thumbnail-empty" in html
        assert "<img" not in html

    def test_links(self):
        [record] = normalize_response({"nodes": make_nodes(1)})

        html = render_card(record)

        assert 'href="https://chub.ai/characters/alice/char-0"' in html
        assert 'href="https://chub.ai/users/alice"' in html
        assert "chubZoom(this)" in html

    def test_tag_limit(self):
        """태그는 최대 개수까지만"""
        record = CharacterRecord(full_path="eve/x", tags=[f"t{i}" for i in range(20)])

        assert render_card(record).count('class="chub-tag"') == MAX_CARD_TAGS


def test_result_choices():
    """가져오기 선택지 (표시명, fullPath)"""
    session = published(normalize_response({"nodes": make_nodes(2)}))

    assert result_choices(session) == [
        ("Character 0 · by alice", "alice/char-0"),
        ("Character 1 · by alice", "alice/char-1"),
    ]


@pytest.mark.asyncio
async def test_render_search_shows_searching_first(fake_chub, client, notifier):
    """검색 중 화면 -> 결과 화면 순서로 생성"""
    fake_chub.search_payload = {"nodes": make_nodes(2)}
    session = SearchSession()

    frames = [html async for html in render_search(CharacterSearch(client, notifier), {}, session)]

    assert len(frames) == 2
    assert "chub-list searching" in frames[0]
    assert "searching" not in frames[1]
    assert frames[1].count('class="chub-card"') == 2


class TestNoticeText:
    """토스트 문구"""

    def test_levels_distinct(self):
        """세 단계 알림이 서로 다른 표시"""
        texts = {level: notice_text(level, "boom", "API Error") for level in ("info", "warning", "error")}

        assert texts["error"] == "❌ API Error: boom"
        assert len(set(texts.values())) == 3

    def test_action_url(self):
        text = notice_text("info", "Click to go to the character page", action_url="https://www.chub.ai/characters/a/b")

        assert text.endswith("→ https://www.chub.ai/characters/a/b")
