"""검색 쿼리 인코딩"""

from enum import Enum
from typing import Any, Optional
from urllib.parse import urlencode

from .models import SearchOptions
from .options import OPTION_FIELDS, FieldKind, OptionField

MAX_TAGS_LENGTH = 500


def _encode_value(field: OptionField, value: Any) -> Optional[str]:
    """필드 종류별 인코딩 (None = 키 생략)"""
    if value is None:
        return None

    if field.kind == FieldKind.TAGS:
        joined = ",".join(tag for tag in value if tag)[:MAX_TAGS_LENGTH]
        return joined or None

    if field.kind == FieldKind.FLAG:
        # false도 반드시 전송
        return "true" if value else "false"

    if field.kind in (FieldKind.NUMBER, FieldKind.PAGE_SIZE, FieldKind.PAGE):
        try:
            return str(int(value))
        except (TypeError, ValueError):
            return None

    if isinstance(value, Enum):
        value = value.value
    return str(value) if value != "" else None


def encode_query(options: SearchOptions) -> dict[str, str]:
    """SearchOptions -> 쿼리 파라미터"""
    query: dict[str, str] = {}
    for field in OPTION_FIELDS:
        encoded = _encode_value(field, getattr(options, field.name))
        if encoded is not None:
            query[field.query_key] = encoded
    return query


def build_query_string(query: dict[str, str]) -> str:
    return urlencode(query)
