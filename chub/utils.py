import re
import sys
from typing import Any, Optional

_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")


def parse_int(value: Any) -> Optional[int]:
    """엄격한 10진수 정수 변환

    "42" -> 42
    " 7 " -> 7
    "", "abc", "4.5", None, True -> None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INT_RE.match(value):
        return int(value)
    return None


def parse_non_negative_int(value: Any) -> Optional[int]:
    """음수는 값 없음으로 취급"""
    number = parse_int(value)
    if number is None or number < 0:
        return None
    return number


def split_tags(value: Any) -> list[str]:
    """쉼표 구분 태그 문자열 또는 리스트를 정리된 태그 목록으로 변환

    "a, b ,,c" -> ["a", "b", "c"]
    순서 유지, 중복 제거 안 함
    """
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = [p for p in value if isinstance(p, str)]
    else:
        return []
    return [p.strip() for p in parts if p.strip()]


def clamp(value: int, minimum: int = 1, maximum: int = sys.maxsize) -> int:
    return min(max(value, minimum), maximum)


def filename_from_disposition(header: Optional[str]) -> Optional[str]:
    """Content-Disposition 헤더에서 파일명 추출

    'attachment; filename="alice_char.png"' -> "alice_char.png"
    """
    if not header or "filename=" not in header:
        return None
    name = header.split("filename=", 1)[1].split(";", 1)[0]
    name = name.replace('"', "").strip()
    return name or None
