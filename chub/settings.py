import json
import logging
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any, Iterator, Optional

from .models import SearchOptions
from .options import DEFAULT_PAGE_SIZE, PAGE_SIZE_SETTING, PERSISTED_FLAGS
from .utils import parse_int

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, Any] = {
    PAGE_SIZE_SETTING: DEFAULT_PAGE_SIZE,
    **{field.setting_key: field.default for field in PERSISTED_FLAGS},
}


class SettingsStore(MutableMapping):
    """검색 설정 저장소 (JSON 파일, 기본값 병합)"""

    def __init__(self, path: Optional[Path] = None, initial: Optional[dict] = None):
        self.path = path
        self.data = self._load(initial)

    def _load(self, initial: Optional[dict]) -> dict:
        data: dict[str, Any] = {}
        if initial is not None:
            data.update(initial)
        elif self.path and self.path.exists():
            with open(self.path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
            if isinstance(loaded, dict):
                data.update(loaded)
        else:
            logger.info("설정 파일 없음, 기본값으로 생성")

        for key, value in DEFAULT_SETTINGS.items():
            if key not in data:
                logger.debug("기본값 설정: %s", key)
                data[key] = value

        size = parse_int(data.get(PAGE_SIZE_SETTING))
        data[PAGE_SIZE_SETTING] = size if size and size > 0 else DEFAULT_PAGE_SIZE
        return data

    def save(self):
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self.data, f, ensure_ascii=False, indent=2)

    def remember(self, options: SearchOptions):
        """검색 시점의 플래그와 페이지 크기를 저장"""
        for field in PERSISTED_FLAGS:
            self.data[field.setting_key] = getattr(options, field.name)
        self.data[PAGE_SIZE_SETTING] = options.page_size
        self.save()

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __setitem__(self, key: str, value: Any):
        self.data[key] = value

    def __delitem__(self, key: str):
        del self.data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)
