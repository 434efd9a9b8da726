"""쿼리 인코딩 단위 테스트"""

from urllib.parse import parse_qs

from chub import SortField, build_query_string, encode_query, normalize_options
from chub.options import OPTION_FIELDS, PERSISTED_FLAGS
from chub.query import MAX_TAGS_LENGTH


def encode(raw, settings=None):
    return encode_query(normalize_options(raw, settings))


class TestEncodeQuery:
    """SearchOptions -> 쿼리 파라미터"""

    def test_numeric_omitted_when_invalid(self):
        """숫자로 변환 안 되는 값은 키 생략"""
        query = encode({"min_tokens": "", "max_tokens": "abc", "min_tags": None})

        assert "min_tokens" not in query
        assert "max_tokens" not in query
        assert "min_tags" not in query

    def test_numeric_included(self):
        """정수 값은 그대로 전송"""
        assert encode({"min_tokens": "42"})["min_tokens"] == "42"

    def test_booleans_always_sent(self):
        """false 플래그도 생략하지 않음"""
        query = encode({})

        for field in PERSISTED_FLAGS:
            assert query[field.query_key] in ("true", "false")
        assert query["nsfw"] == "false"
        assert query["include_forks"] == "true"
        assert query["asc"] == "false"

    def test_account_flags_omitted(self):
        """계정 플래그는 지정했을 때만 전송"""
        assert "only_mine" not in encode({})
        assert encode({"only_mine": True})["only_mine"] == "true"

    def test_tags_joined(self):
        """태그는 쉼표로 합침"""
        query = encode({"include_tags": "a, b ,,c", "exclude_tags": ""})

        assert query["tags"] == "a,b,c"
        assert "exclude_tags" not in query

    def test_tags_truncated(self):
        """태그 문자열은 500자로 자름"""
        tags = ",".join(f"tag{i:04d}" for i in range(200))

        query = encode({"include_tags": tags})

        assert len(query["tags"]) == MAX_TAGS_LENGTH
        assert tags.startswith(query["tags"])

    def test_empty_text_omitted(self):
        """빈 문자열은 전송 안 함"""
        query = encode({"search_term": "", "name_like": "elf"})

        assert "search" not in query
        assert query["name_like"] == "elf"

    def test_sort_and_page(self):
        """정렬/페이지 키"""
        query = encode({"sort_field": SortField.RATING, "sort_ascending": True})

        assert query["sort"] == "rating"
        assert query["asc"] == "true"
        assert query["first"] == "30"
        assert query["page"] == "1"

    def test_search_request_example(self):
        """태그 + 페이지 + 페이지 크기 조합"""
        query = encode({"includeTags": ["fantasy", "elf"], "inclusive_or": False, "page": 2, "first": 10})

        assert query["tags"] == "fantasy,elf"
        assert query["inclusive_or"] == "false"
        assert query["page"] == "2"
        assert query["first"] == "10"

    def test_keys_come_from_field_table(self):
        """모든 쿼리 키는 필드 테이블에 정의된 키"""
        known = {field.query_key for field in OPTION_FIELDS}

        assert set(encode({"search_term": "x", "min_tokens": 1})) <= known


def test_build_query_string():
    """URL 쿼리 문자열 생성"""
    query_string = build_query_string({"search": "dark elf", "tags": "a,b"})

    assert parse_qs(query_string) == {"search": ["dark elf"], "tags": ["a,b"]}
