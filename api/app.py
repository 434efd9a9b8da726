"""FastAPI 애플리케이션"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from chub import (
    CharacterDownloader,
    CharacterRecord,
    CharacterSearch,
    ChubClient,
    CollectingNotifier,
    ContentKind,
    DirectoryIngestor,
    SettingsStore,
)


class NoticeResponse(BaseModel):
    level: str
    message: str
    title: str = ""
    action_url: Optional[str] = None


class SearchResponse(BaseModel):
    """검색 응답"""

    total: int
    page: int
    query: dict[str, str]
    results: list[CharacterRecord]
    notices: list[NoticeResponse] = []


class ImportRequest(BaseModel):
    url: str  # fullPath


class ImportResponse(BaseModel):
    filename: str
    kind: ContentKind
    size: int


def _notices(notifier: CollectingNotifier) -> list[NoticeResponse]:
    return [NoticeResponse(**vars(n)) for n in notifier.notices]


def create_app(
    data_dir: Path = Path("data"),
    client: Optional[ChubClient] = None,
    search_url: Optional[str] = None,
    host_url: Optional[str] = None,
) -> FastAPI:
    """FastAPI 앱 생성

    client가 주어지면 그대로 사용하고, 없으면 lifespan에서 열고 닫는다.
    """

    settings = SettingsStore(data_dir / "settings.json")
    ingestor = DirectoryIngestor(data_dir / "imports")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """앱 라이프사이클 관리"""
        if client is not None:
            yield
            return
        async with ChubClient(search_url=search_url, host_url=host_url) as own_client:
            app.state.client = own_client
            yield

    app = FastAPI(
        title="Chub Search API",
        description="Chub 캐릭터 검색/가져오기 API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.client = client

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_client(request: Request) -> ChubClient:
        if request.app.state.client is None:
            raise RuntimeError("Client not initialized")
        return request.app.state.client

    @app.get("/")
    async def root():
        """API 상태 확인"""
        return {"status": "ok", "message": "Chub Search API"}

    @app.get("/search", response_model=SearchResponse)
    async def search(
        request: Request,
        q: str = Query("", description="전문 검색어"),
        name_like: str = Query("", description="이름 포함"),
        tags: str = Query("", description="포함 태그 (쉼표 구분)"),
        exclude_tags: str = Query("", description="제외 태그 (쉼표 구분)"),
        inclusive_or: Optional[bool] = Query(None, description="태그 OR 조건"),
        nsfw: Optional[bool] = Query(None),
        nsfl: Optional[bool] = Query(None),
        min_tokens: Optional[int] = Query(None, ge=0),
        max_tokens: Optional[int] = Query(None, ge=0),
        language: str = Query(""),
        sort: str = Query("download_count", description="정렬 기준"),
        asc: bool = Query(False),
        first: Optional[int] = Query(None, ge=1, le=100, description="페이지 크기"),
        page: int = Query(1, ge=1),
    ):
        """캐릭터 검색"""
        notifier = CollectingNotifier()
        searcher = CharacterSearch(get_client(request), notifier, settings)

        raw = {
            "search_term": q,
            "name_like": name_like,
            "include_tags": tags,
            "exclude_tags": exclude_tags,
            "inclusive_or": inclusive_or,
            "nsfw": nsfw,
            "nsfl": nsfl,
            "min_tokens": min_tokens,
            "max_tokens": max_tokens,
            "language": language,
            "sort_field": sort,
            "sort_ascending": asc,
            "page_size": first,
            "page_number": page,
        }
        options, query = searcher.prepare(raw)
        records = await searcher.search(raw)

        return SearchResponse(
            total=len(records),
            page=options.page_number,
            query=query,
            results=records,
            notices=_notices(notifier),
        )

    @app.post("/import", response_model=ImportResponse)
    async def import_character(request: Request, body: ImportRequest):
        """캐릭터 가져오기"""
        notifier = CollectingNotifier()
        downloader = CharacterDownloader(
            get_client(request),
            notifier,
            {ContentKind.CHARACTER: ingestor},
        )
        file = await downloader.download(body.url)
        if file is None:
            raise HTTPException(
                status_code=502,
                detail=[n.model_dump() for n in _notices(notifier)],
            )
        return ImportResponse(filename=file.filename, kind=file.kind, size=len(file.content))

    return app
