"""검색 옵션 정규화

폼 입력, 저장된 설정, 기본값을 하나의 SearchOptions로 합친다.
옵션 이름 -> 설정 키 -> 쿼리 키 대응은 OPTION_FIELDS 테이블에 고정되어 있다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from .models import SearchOptions, SortField
from .utils import clamp, parse_int, parse_non_negative_int, split_tags

DEFAULT_PAGE_SIZE = 30
PAGE_SIZE_SETTING = "findCount"


class FieldKind(str, Enum):
    TEXT = "text"
    TAGS = "tags"
    NUMBER = "number"
    FLAG = "flag"
    SORT = "sort"
    PAGE_SIZE = "page_size"
    PAGE = "page"


class PageTrigger(str, Enum):
    """검색을 일으킨 입력 종류"""

    FILTER = "filter"  # 필터 변경, 검색 버튼, 엔터
    PAGE = "page"  # 페이지 번호 직접 입력
    NEXT = "next"
    PREV = "prev"


@dataclass(frozen=True)
class OptionField:
    name: str  # SearchOptions 속성명
    kind: FieldKind
    query_key: str
    setting_key: Optional[str] = None
    default: Any = None
    aliases: tuple[str, ...] = ()


def _flag(name: str, default: Optional[bool] = False, persisted: bool = True, *aliases: str) -> OptionField:
    return OptionField(
        name=name,
        kind=FieldKind.FLAG,
        query_key=name,
        setting_key=name if persisted else None,
        default=default,
        aliases=aliases,
    )


OPTION_FIELDS: tuple[OptionField, ...] = (
    OptionField("search_term", FieldKind.TEXT, "search", aliases=("searchTerm", "search", "q")),
    OptionField("name_like", FieldKind.TEXT, "name_like", aliases=("nameLike",)),
    OptionField("language", FieldKind.TEXT, "language"),
    OptionField("username", FieldKind.TEXT, "username"),
    OptionField("include_tags", FieldKind.TAGS, "tags", aliases=("includeTags", "tags")),
    OptionField("exclude_tags", FieldKind.TAGS, "exclude_tags", aliases=("excludeTags",)),
    OptionField("topics", FieldKind.TAGS, "topics"),
    OptionField("exclude_topics", FieldKind.TAGS, "excludetopics", aliases=("excludetopics", "excludeTopics")),
    OptionField("min_tokens", FieldKind.NUMBER, "min_tokens", aliases=("minTokens",)),
    OptionField("max_tokens", FieldKind.NUMBER, "max_tokens", aliases=("maxTokens",)),
    OptionField("min_tags", FieldKind.NUMBER, "min_tags", aliases=("minTags",)),
    OptionField("min_users_chatted", FieldKind.NUMBER, "min_users_chatted", aliases=("minUsersChatted",)),
    OptionField("max_days_ago", FieldKind.NUMBER, "max_days_ago", aliases=("maxDaysAgo",)),
    OptionField("min_ai_rating", FieldKind.NUMBER, "min_ai_rating", aliases=("minAiRating",)),
    OptionField("creator_id", FieldKind.NUMBER, "creator_id", aliases=("creatorId",)),
    _flag("nsfw"),
    _flag("nsfl"),
    _flag("nsfw_only", False, True, "nsfwOnly"),
    _flag("require_images", False, True, "requireImages"),
    _flag("require_example_dialogues", False, True, "requireExampleDialogues"),
    _flag("require_alternate_greetings", False, True, "requireAlternateGreetings"),
    _flag("require_custom_prompt", False, True, "requireCustomPrompt"),
    _flag("require_expressions", False, True, "requireExpressions"),
    _flag("require_lore", False, True, "requireLore"),
    _flag("require_lore_embedded", False, True, "requireLoreEmbedded"),
    _flag("require_lore_linked", False, True, "requireLoreLinked"),
    _flag("recommended_verified", False, True, "recommendedVerified"),
    _flag("inclusive_or", False, True, "inclusiveOr"),
    _flag("include_forks", True, True, "includeForks"),
    _flag("exclude_mine", None, False, "excludeMine"),
    _flag("only_mine", None, False, "onlyMine"),
    _flag("mine_first", None, False, "mineFirst"),
    _flag("my_favorites", None, False, "myFavorites"),
    OptionField("sort_field", FieldKind.SORT, "sort", default=SortField.DOWNLOAD_COUNT, aliases=("sortField", "sort")),
    OptionField("sort_ascending", FieldKind.FLAG, "asc", default=False, aliases=("sortAscending", "asc")),
    OptionField(
        "page_size",
        FieldKind.PAGE_SIZE,
        "first",
        setting_key=PAGE_SIZE_SETTING,
        default=DEFAULT_PAGE_SIZE,
        aliases=("pageSize", "first"),
    ),
    OptionField("page_number", FieldKind.PAGE, "page", default=1, aliases=("pageNumber", "page")),
)

PERSISTED_FLAGS: tuple[OptionField, ...] = tuple(
    f for f in OPTION_FIELDS if f.kind == FieldKind.FLAG and f.setting_key
)


def _lookup(raw: Mapping[str, Any], field: OptionField) -> Any:
    for key in (field.name, *field.aliases):
        if key in raw:
            return raw[key]
    return None


def _resolve_flag(value: Any, field: OptionField, settings: Mapping[str, Any]) -> Optional[bool]:
    # 명시값 > 저장값 > 기본값
    if isinstance(value, bool):
        return value
    if field.setting_key:
        stored = settings.get(field.setting_key)
        if isinstance(stored, bool):
            return stored
    return field.default


def _resolve_sort(value: Any) -> SortField:
    if isinstance(value, SortField):
        return value
    try:
        return SortField(value)
    except ValueError:
        return SortField.DOWNLOAD_COUNT


def _resolve_page_size(value: Any, settings: Mapping[str, Any]) -> int:
    for candidate in (value, settings.get(PAGE_SIZE_SETTING)):
        size = parse_int(candidate)
        if size is not None and size > 0:
            return size
    return DEFAULT_PAGE_SIZE


def _resolve_page(value: Any) -> int:
    page = parse_int(value)
    return clamp(page) if page is not None else 1


def normalize_options(raw: Optional[Mapping[str, Any]], settings: Optional[Mapping[str, Any]] = None) -> SearchOptions:
    """원시 옵션을 SearchOptions로 정규화 (예외 없음)"""
    raw = raw or {}
    settings = settings or {}
    values: dict[str, Any] = {}

    for field in OPTION_FIELDS:
        value = _lookup(raw, field)

        if field.kind == FieldKind.TEXT:
            values[field.name] = value if isinstance(value, str) else ""
        elif field.kind == FieldKind.TAGS:
            values[field.name] = tuple(split_tags(value))
        elif field.kind == FieldKind.NUMBER:
            values[field.name] = parse_non_negative_int(value)
        elif field.kind == FieldKind.FLAG:
            values[field.name] = _resolve_flag(value, field, settings)
        elif field.kind == FieldKind.SORT:
            values[field.name] = _resolve_sort(value)
        elif field.kind == FieldKind.PAGE_SIZE:
            values[field.name] = _resolve_page_size(value, settings)
        elif field.kind == FieldKind.PAGE:
            values[field.name] = _resolve_page(value)

    return SearchOptions(**values)


def resolve_page(current: Any, trigger: PageTrigger = PageTrigger.FILTER) -> int:
    """페이지 버튼 처리 (페이지 관련 입력이 아니면 1페이지로)"""
    page = parse_int(current) or 1
    if trigger == PageTrigger.NEXT:
        page += 1
    elif trigger == PageTrigger.PREV:
        page -= 1
    elif trigger != PageTrigger.PAGE:
        page = 1
    return clamp(page)
