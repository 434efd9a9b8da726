"""검색 실행 (정규화 -> 인코딩 -> 요청 -> 응답 정규화 -> 화면 반영)"""

import asyncio
import logging
from contextlib import nullcontext
from typing import Any, Mapping, Optional

import aiohttp

from .client import ChubAPIError, ChubClient
from .models import CharacterRecord, SearchOptions
from .normalizer import normalize_response
from .notify import Notifier
from .options import normalize_options
from .query import build_query_string, encode_query
from .session import SearchSession
from .settings import SettingsStore

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No characters found for the specified criteria."


class CharacterSearch:
    """Chub 캐릭터 검색"""

    def __init__(
        self,
        client: ChubClient,
        notifier: Notifier,
        settings: Optional[Mapping[str, Any]] = None,
    ):
        self.client = client
        self.notifier = notifier
        self.settings = settings if settings is not None else {}

    def prepare(self, raw: Optional[Mapping[str, Any]]) -> tuple[SearchOptions, dict[str, str]]:
        options = normalize_options(raw, self.settings)
        return options, encode_query(options)

    async def _fetch(self, query: dict[str, str]) -> tuple[list[CharacterRecord], Optional[tuple[str, str]]]:
        """요청 + 응답 정규화 (실패 시 빈 목록과 (메시지, 제목))"""
        logger.info("Fetching Chub: %s?%s", self.client.search_url, build_query_string(query))
        try:
            payload = await self.client.search(query)
        except ChubAPIError as e:
            return [], (f"Chub search failed: {e.message}", "API Error")
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error("Error during Chub search fetch: %s", e)
            return [], ("An error occurred while searching Chub.", "Fetch Error")
        return normalize_response(payload), None

    async def search(
        self,
        raw: Optional[Mapping[str, Any]] = None,
        session: Optional[SearchSession] = None,
        remember: bool = False,
    ) -> list[CharacterRecord]:
        """검색 실행

        session이 주어지면 검색 중 표시와 결과 반영까지 처리한다.
        더 늦게 시작한 검색이 있으면 결과도 알림도 반영하지 않는다.
        remember=True면 요청 직전에 정규화된 플래그/페이지 크기를 설정에 기록한다.
        """
        options, query = self.prepare(raw)
        logger.debug("Searching for characters with options: %s", options)

        if remember and isinstance(self.settings, SettingsStore):
            self.settings.remember(options)

        ticket = session.begin() if session else 0
        with session.mark_searching() if session else nullcontext():
            records, failure = await self._fetch(query)

        if session and not session.publish(ticket, records, options):
            logger.debug("이전 요청 응답 무시 (ticket=%d, 최신=%d)", ticket, session.generation)
            if failure:
                logger.warning("이전 요청 실패 (알림 생략): %s", failure[0])
            return records

        if failure:
            self.notifier.error(*failure)
        elif not records:
            logger.info("No characters found")
            self.notifier.info(NO_RESULTS_MESSAGE, "Chub Search")
        else:
            logger.info("Found %d characters", len(records))

        return records
