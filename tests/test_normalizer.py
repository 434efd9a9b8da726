"""검색 응답 정규화 단위 테스트"""

import pytest

from chub import normalize_response
from chub.models import PLACEHOLDER_IMAGE, UNKNOWN_AUTHOR
from chub.normalizer import derive_author

from .conftest import make_nodes


class TestNormalizeResponse:
    """응답 형태별 처리"""

    def test_empty_shapes(self):
        """노드가 없으면 빈 목록"""
        assert normalize_response({}) == []
        assert normalize_response({"nodes": []}) == []
        assert normalize_response({"data": {}}) == []
        assert normalize_response(None) == []
        assert normalize_response(["not", "a", "dict"]) == []

    def test_nested_data_nodes(self):
        """data.nodes 아래의 노드"""
        records = normalize_response({"data": {"nodes": make_nodes(3)}})

        assert [r.full_path for r in records] == ["alice/char-0", "alice/char-1", "alice/char-2"]

    def test_order_preserved(self):
        """응답 순서 유지"""
        records = normalize_response({"nodes": make_nodes(10)})

        assert len(records) == 10
        assert [r.name for r in records] == [f"Character {i}" for i in range(10)]

    def test_minimal_node(self):
        """fullPath와 name만 있는 노드"""
        [record] = normalize_response({"nodes": [{"fullPath": "alice/my-char", "name": "X"}]})

        assert record.author == "alice"
        assert record.description == "No description."
        assert record.image_url == PLACEHOLDER_IMAGE
        assert record.name == "X"
        assert record.tags == ()
        assert record.has_image is False

    def test_full_node(self):
        """모든 필드가 있는 노드"""
        [record] = normalize_response({"nodes": make_nodes(1, author="bob")})

        assert record.full_path == "bob/char-0"
        assert record.id == "bob/char-0"
        assert record.description == "Tagline 0"
        assert record.tags == ("fantasy", "tag-0")
        assert record.page_url == "https://chub.ai/characters/bob/char-0"
        assert record.author_url == "https://chub.ai/users/bob"

    def test_avatar_fallback(self):
        """avatar_url이 없으면 avatar 사용"""
        [record] = normalize_response({"nodes": [{"fullPath": "a/b", "avatar": "https://img/b.png"}]})

        assert record.image_url == "https://img/b.png"
        assert record.name == "Unnamed Character"

    def test_node_without_full_path_skipped(self):
        """fullPath 없는 노드는 제외"""
        nodes = [{"name": "orphan"}, {"fullPath": "", "name": "blank"}, *make_nodes(1)]

        records = normalize_response({"nodes": nodes})

        assert [r.full_path for r in records] == ["alice/char-0"]

    def test_empty_top_level_nodes_kept(self):
        """nodes가 빈 목록이면 data.nodes를 보지 않음"""
        assert normalize_response({"nodes": [], "data": {"nodes": make_nodes(2)}}) == []

    def test_record_immutable(self):
        """결과 레코드의 태그는 변경 불가"""
        [record] = normalize_response({"nodes": make_nodes(1)})

        with pytest.raises(AttributeError):
            record.tags.append("extra")
        assert record.tags == ("fantasy", "tag-0")

    def test_non_string_topics_dropped(self):
        """문자열이 아닌 태그 제거"""
        [record] = normalize_response({"nodes": [{"fullPath": "a/b", "topics": ["ok", 3, None]}]})

        assert record.tags == ("ok",)


def test_derive_author():
    """fullPath 첫 세그먼트가 제작자"""
    assert derive_author("alice/my-char") == "alice"
    assert derive_author("solo") == "solo"
    assert derive_author("/slug") == UNKNOWN_AUTHOR
