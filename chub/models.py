"""검색/가져오기 데이터 모델"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, computed_field

CHUB_CHARACTER_URL = "https://chub.ai/characters"
CHUB_USER_URL = "https://chub.ai/users"
PLACEHOLDER_IMAGE = "chub/assets/placeholder.png"

DEFAULT_NAME = "Unnamed Character"
DEFAULT_DESCRIPTION = "No description."
UNKNOWN_AUTHOR = "Unknown Author"


class SortField(str, Enum):
    DOWNLOAD_COUNT = "download_count"
    LAST_ACTIVITY_AT = "last_activity_at"
    RATING = "rating"
    CREATED_AT = "created_at"
    NAME = "name"
    N_TOKENS = "n_tokens"
    TRENDING_DOWNLOADS = "trending_downloads"
    ID = "id"
    RATING_COUNT = "rating_count"
    RANDOM = "random"


# 정렬 선택지 표시명
SORT_LABELS = {
    SortField.DOWNLOAD_COUNT: "Downloads",
    SortField.LAST_ACTIVITY_AT: "Last Activity",
    SortField.RATING: "Rating",
    SortField.CREATED_AT: "Creation Date",
    SortField.NAME: "Name",
    SortField.N_TOKENS: "Tokens",
    SortField.TRENDING_DOWNLOADS: "Trending",
    SortField.ID: "ID (Newest)",
    SortField.RATING_COUNT: "Rating Count",
    SortField.RANDOM: "Random",
}


class ContentKind(str, Enum):
    """X-Custom-Content-Type 헤더 값"""

    CHARACTER = "character"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ContentKind"]:
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return None


class SearchOptions(BaseModel):
    """정규화된 검색 옵션 (검색마다 새로 생성)"""

    model_config = ConfigDict(frozen=True)

    # 자유 텍스트
    search_term: str = ""
    name_like: str = ""
    language: str = ""
    username: str = ""

    # 태그 필터
    include_tags: tuple[str, ...] = ()
    exclude_tags: tuple[str, ...] = ()
    topics: tuple[str, ...] = ()
    exclude_topics: tuple[str, ...] = ()

    # 숫자 필터 (None = 제한 없음)
    min_tokens: Optional[int] = None
    max_tokens: Optional[int] = None
    min_tags: Optional[int] = None
    min_users_chatted: Optional[int] = None
    max_days_ago: Optional[int] = None
    min_ai_rating: Optional[int] = None
    creator_id: Optional[int] = None

    # 저장되는 플래그
    nsfw: bool = False
    nsfl: bool = False
    nsfw_only: bool = False
    require_images: bool = False
    require_example_dialogues: bool = False
    require_alternate_greetings: bool = False
    require_custom_prompt: bool = False
    require_expressions: bool = False
    require_lore: bool = False
    require_lore_embedded: bool = False
    require_lore_linked: bool = False
    recommended_verified: bool = False
    inclusive_or: bool = False
    include_forks: bool = True

    # 계정 컨텍스트 필요 (None = 전송 안 함)
    exclude_mine: Optional[bool] = None
    only_mine: Optional[bool] = None
    mine_first: Optional[bool] = None
    my_favorites: Optional[bool] = None

    # 정렬/페이지
    sort_field: SortField = SortField.DOWNLOAD_COUNT
    sort_ascending: bool = False
    page_size: int = 30
    page_number: int = 1


class CharacterRecord(BaseModel):
    """검색 결과 캐릭터 (정규화 완료)"""

    model_config = ConfigDict(frozen=True)

    full_path: str  # "<author>/<slug>", 다운로드 키
    name: str = DEFAULT_NAME
    description: str = DEFAULT_DESCRIPTION
    author: str = UNKNOWN_AUTHOR
    tags: tuple[str, ...] = ()
    image_url: str = PLACEHOLDER_IMAGE

    @property
    def id(self) -> str:
        return self.full_path

    @computed_field
    @property
    def page_url(self) -> str:
        return f"{CHUB_CHARACTER_URL}/{self.full_path}"

    @computed_field
    @property
    def author_url(self) -> str:
        return f"{CHUB_USER_URL}/{self.author}"

    @property
    def has_image(self) -> bool:
        return self.image_url != PLACEHOLDER_IMAGE


class ImportableFile(BaseModel):
    """가져오기 응답으로 만든 파일"""

    filename: str
    content: bytes
    media_type: str = "application/octet-stream"
    kind: ContentKind
