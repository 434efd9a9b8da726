import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Optional
from urllib.parse import quote

import aiohttp

from .utils import filename_from_disposition

logger = logging.getLogger(__name__)

HeadersProvider = Callable[[], dict[str, str]]


class ChubAPIError(Exception):
    """원격 서버가 2xx 이외의 상태를 반환"""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


@dataclass
class ImportResponse:
    """호스트 가져오기 엔드포인트 응답"""

    content: bytes
    content_kind: Optional[str]
    filename: Optional[str]
    media_type: str
    endpoint: str


def default_request_headers() -> dict[str, str]:
    """호스트 요청 헤더 (HOST_CSRF_TOKEN 환경변수 사용)"""
    headers = {"Content-Type": "application/json"}
    token = os.getenv("HOST_CSRF_TOKEN")
    if token:
        headers["X-CSRF-Token"] = token
    return headers


class ChubClient:
    SEARCH_URL = "https://inference.chub.ai/search"
    HOST_URL = "http://127.0.0.1:8000"
    IMPORT_PATH = "/api/content/importUUID"
    LEGACY_IMPORT_PATH = "/import_custom"
    AVATAR_BASE = "https://avatars.charhub.io/avatars"
    DOWNLOAD_URL = "https://api.chub.ai/api/characters/download"

    def __init__(
        self,
        search_url: Optional[str] = None,
        host_url: Optional[str] = None,
        avatar_base: Optional[str] = None,
        download_url: Optional[str] = None,
        headers_provider: Optional[HeadersProvider] = None,
        timeout: int = 30,
    ):
        self.search_url = search_url or self.SEARCH_URL
        self.host_url = (host_url or self.HOST_URL).rstrip("/")
        self.avatar_base = (avatar_base or self.AVATAR_BASE).rstrip("/")
        self.download_url = download_url or self.DOWNLOAD_URL
        self.headers_provider = headers_provider or default_request_headers
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self

    async def __aexit__(self, *args):
        if self._session:
            await self._session.close()
            self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("Session not initialized. Use async with.")
        return self._session

    @staticmethod
    async def _error_message(resp: aiohttp.ClientResponse) -> str:
        """서버 오류 메시지 추출 (없으면 상태 문구)"""
        try:
            data = await resp.json(content_type=None)
        except (aiohttp.ClientError, ValueError):
            data = None
        if isinstance(data, dict) and data.get("message"):
            logger.error("API Error Details: %s", data)
            return str(data["message"])
        return resp.reason or f"HTTP {resp.status}"

    async def search(self, query: dict[str, str]) -> Any:
        """검색 엔드포인트 호출 (JSON 본문 반환)

        2xx가 아니면 ChubAPIError, 전송 실패는 aiohttp.ClientError / asyncio.TimeoutError
        """
        async with self.session.get(self.search_url, params=query) as resp:
            if resp.status >= 300:
                logger.error("Chub API request failed: %s %s", resp.status, resp.reason)
                raise ChubAPIError(resp.status, await self._error_message(resp))
            return await resp.json(content_type=None)

    async def _post_import(self, path: str, identifier: str) -> aiohttp.ClientResponse:
        return await self.session.post(
            self.host_url + path,
            json={"url": identifier},
            headers=self.headers_provider(),
        )

    async def request_import(self, identifier: str) -> ImportResponse:
        """호스트 가져오기 요청 (importUUID 실패 시 import_custom)"""
        resp = await self._post_import(self.IMPORT_PATH, identifier)
        endpoint = self.IMPORT_PATH
        if resp.status >= 300:
            resp.release()
            logger.info("%s 실패 (%s), %s 재시도", self.IMPORT_PATH, resp.status, self.LEGACY_IMPORT_PATH)
            resp = await self._post_import(self.LEGACY_IMPORT_PATH, identifier)
            endpoint = self.LEGACY_IMPORT_PATH

        async with resp:
            if resp.status >= 300:
                logger.error("Custom content import failed: %s %s", resp.status, resp.reason)
                raise ChubAPIError(resp.status, resp.reason or f"HTTP {resp.status}")

            return ImportResponse(
                content=await resp.read(),
                content_kind=resp.headers.get("X-Custom-Content-Type"),
                filename=filename_from_disposition(resp.headers.get("Content-Disposition")),
                media_type=resp.content_type,
                endpoint=endpoint,
            )

    async def fetch_avatar(self, full_path: str) -> Optional[bytes]:
        """아바타 이미지 조회 (실패 시 다운로드 엔드포인트로 폴백)"""
        avatar_url = f"{self.avatar_base}/{quote(full_path)}/avatar.webp"
        try:
            async with self.session.get(avatar_url) as resp:
                if resp.status == 200:
                    return await self._read_image(resp, full_path)
                logger.info("아바타 요청 실패 (%s, %s), 다운로드 엔드포인트 시도", full_path, resp.status)

            payload = {"fullPath": full_path, "format": "tavern", "version": "main"}
            async with self.session.post(self.download_url, json=payload) as resp:
                if resp.status == 200:
                    return await self._read_image(resp, full_path)
                logger.error("아바타 조회 실패 (%s): 두 엔드포인트 모두 실패", full_path)
                return None

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("아바타 조회 오류 (%s): %s", full_path, e)
            return None

    @staticmethod
    async def _read_image(resp: aiohttp.ClientResponse, full_path: str) -> Optional[bytes]:
        content_type = resp.headers.get("Content-Type", "")
        if content_type.startswith("image/"):
            return await resp.read()
        logger.warning("이미지가 아닌 응답 (%s): %s", content_type, full_path)
        return None
