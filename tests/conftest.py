"""테스트 설정

Chub 검색/호스트 가져오기/아바타 엔드포인트를 흉내내는 aiohttp 서버를 띄운다.
"""

import asyncio

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from chub import ChubClient, CollectingNotifier, SearchSession

CSRF_TOKEN = "test-csrf-token"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-card"


def make_nodes(count: int, author: str = "alice") -> list[dict]:
    """검색 응답용 노드 생성"""
    return [
        {
            "id": i,
            "fullPath": f"{author}/char-{i}",
            "name": f"Character {i}",
            "tagline": f"Tagline {i}",
            "topics": ["fantasy", f"tag-{i}"],
            "avatar_url": f"https://avatars.example/{author}/char-{i}.webp",
        }
        for i in range(count)
    ]


class FakeChub:
    """원격 서버 상태 (테스트에서 직접 조작)"""

    def __init__(self):
        self.base_url = ""

        # 검색
        self.search_status = 200
        self.search_payload: object = {"nodes": []}
        self.payloads_by_term: dict[str, object] = {}
        self.delays_by_term: dict[str, float] = {}
        self.search_queries: list[dict[str, str]] = []

        # 가져오기
        self.import_status = 200
        self.legacy_status = 200
        self.content_kind = "character"
        self.disposition = 'attachment; filename="alice_char.png"'
        self.import_calls: list[tuple[str, dict, str | None]] = []

        # 아바타
        self.avatar_status = 200
        self.avatar_content_type = "image/webp"
        self.download_status = 200
        self.download_content_type = "image/png"
        self.download_calls: list[dict] = []

    async def search(self, request: web.Request) -> web.Response:
        query = dict(request.query)
        self.search_queries.append(query)

        term = query.get("search", "")
        delay = self.delays_by_term.get(term)
        if delay:
            await asyncio.sleep(delay)

        if self.search_status >= 300:
            return web.json_response({"message": "boom"}, status=self.search_status)
        return web.json_response(self.payloads_by_term.get(term, self.search_payload))

    async def _import(self, request: web.Request, status: int) -> web.Response:
        body = await request.json()
        self.import_calls.append((request.path, body, request.headers.get("X-CSRF-Token")))
        if status >= 300:
            return web.Response(status=status, text="nope")

        headers = {"X-Custom-Content-Type": self.content_kind}
        if self.disposition:
            headers["Content-Disposition"] = self.disposition
        return web.Response(body=PNG_BYTES, content_type="image/png", headers=headers)

    async def import_uuid(self, request: web.Request) -> web.Response:
        return await self._import(request, self.import_status)

    async def import_custom(self, request: web.Request) -> web.Response:
        return await self._import(request, self.legacy_status)

    async def avatar(self, request: web.Request) -> web.Response:
        if self.avatar_status != 200:
            return web.Response(status=self.avatar_status)
        return web.Response(body=b"avatar-bytes", content_type=self.avatar_content_type)

    async def download(self, request: web.Request) -> web.Response:
        self.download_calls.append(await request.json())
        if self.download_status != 200:
            return web.Response(status=self.download_status)
        return web.Response(body=b"card-bytes", content_type=self.download_content_type)

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/search", self.search)
        app.router.add_post("/api/content/importUUID", self.import_uuid)
        app.router.add_post("/import_custom", self.import_custom)
        app.router.add_get("/avatars/{author}/{slug}/avatar.webp", self.avatar)
        app.router.add_post("/download", self.download)
        return app


@pytest_asyncio.fixture
async def fake_chub():
    """가짜 Chub 서버"""
    fake = FakeChub()
    server = TestServer(fake.make_app())
    await server.start_server()
    fake.base_url = str(server.make_url("")).rstrip("/")
    yield fake
    await server.close()


@pytest_asyncio.fixture
async def client(fake_chub):
    """가짜 서버를 바라보는 ChubClient"""
    base = fake_chub.base_url
    async with ChubClient(
        search_url=f"{base}/search",
        host_url=base,
        avatar_base=f"{base}/avatars",
        download_url=f"{base}/download",
        headers_provider=lambda: {"Content-Type": "application/json", "X-CSRF-Token": CSRF_TOKEN},
        timeout=5,
    ) as chub_client:
        yield chub_client


@pytest.fixture
def notifier():
    return CollectingNotifier()


@pytest.fixture
def session():
    return SearchSession()
