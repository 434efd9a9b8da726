"""검색 응답 정규화"""

import logging
from typing import Any, Optional

from .models import (
    DEFAULT_DESCRIPTION,
    DEFAULT_NAME,
    PLACEHOLDER_IMAGE,
    UNKNOWN_AUTHOR,
    CharacterRecord,
)

logger = logging.getLogger(__name__)


def extract_nodes(payload: Any) -> list[dict]:
    """응답에서 노드 목록 추출

    {"nodes": [...]} 또는 {"data": {"nodes": [...]}} 형태
    """
    if not isinstance(payload, dict):
        return []

    nodes = payload.get("nodes")
    if nodes is None:
        data = payload.get("data")
        nodes = data.get("nodes") if isinstance(data, dict) else None

    if not isinstance(nodes, list):
        return []
    return [node for node in nodes if isinstance(node, dict)]


def _text(node: dict, key: str) -> str:
    value = node.get(key)
    return value if isinstance(value, str) else ""


def derive_author(full_path: str) -> str:
    """fullPath의 첫 번째 '/' 앞부분이 제작자"""
    return full_path.split("/")[0] or UNKNOWN_AUTHOR


def normalize_node(node: dict) -> Optional[CharacterRecord]:
    """단일 노드 -> CharacterRecord (fullPath 없으면 None)"""
    full_path = _text(node, "fullPath").strip()
    if not full_path:
        return None

    image_url = _text(node, "avatar_url") or _text(node, "avatar") or PLACEHOLDER_IMAGE
    topics = node.get("topics") or []

    return CharacterRecord(
        full_path=full_path,
        name=_text(node, "name") or DEFAULT_NAME,
        description=_text(node, "tagline") or DEFAULT_DESCRIPTION,
        author=derive_author(full_path),
        tags=tuple(t for t in topics if isinstance(t, str)) if isinstance(topics, list) else (),
        image_url=image_url,
    )


def normalize_response(payload: Any) -> list[CharacterRecord]:
    """검색 응답 -> CharacterRecord 목록 (순서 유지)"""
    records = []
    for node in extract_nodes(payload):
        record = normalize_node(node)
        if record is None:
            logger.debug("fullPath 없는 노드 제외: %s", node.get("id"))
            continue
        records.append(record)
    return records
