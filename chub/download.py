"""캐릭터 가져오기

호스트 가져오기 엔드포인트에서 파일을 받아 콘텐츠 종류별 수집기에 넘긴다.
"""

import asyncio
import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import aiohttp

from .client import ChubAPIError, ChubClient, ImportResponse
from .models import ContentKind, ImportableFile
from .notify import Notifier

logger = logging.getLogger(__name__)

CHUB_MANUAL_URL = "https://www.chub.ai/characters"

Ingestor = Callable[[ImportableFile], Any]


class DirectoryIngestor:
    """가져온 파일을 디렉토리에 저장"""

    def __init__(self, directory: Path):
        self.directory = directory

    def __call__(self, file: ImportableFile) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / Path(file.filename).name
        path.write_bytes(file.content)
        logger.info("저장 완료: %s (%d bytes)", path, len(file.content))
        return path


def _fallback_filename(identifier: str) -> str:
    return f"{identifier.rstrip('/').split('/')[-1] or 'character'}.png"


class CharacterDownloader:
    def __init__(
        self,
        client: ChubClient,
        notifier: Notifier,
        ingestors: Optional[dict[ContentKind, Ingestor]] = None,
    ):
        self.client = client
        self.notifier = notifier
        self.ingestors: dict[ContentKind, Ingestor] = dict(ingestors or {})

    def register(self, kind: ContentKind, ingestor: Ingestor):
        self.ingestors[kind] = ingestor

    def _to_file(self, identifier: str, response: ImportResponse) -> Optional[ImportableFile]:
        kind = ContentKind.parse(response.content_kind)
        if kind is None or kind not in self.ingestors:
            logger.error("Unknown content type: %s", response.content_kind)
            self.notifier.warning("Unknown content type")
            return None

        return ImportableFile(
            filename=response.filename or _fallback_filename(identifier),
            content=response.content,
            media_type=response.media_type,
            kind=kind,
        )

    async def download(self, identifier: str) -> Optional[ImportableFile]:
        """캐릭터 가져오기 (실패해도 예외를 던지지 않음)"""
        identifier = (identifier or "").strip()
        if not identifier:
            logger.error("Download requested without a character path")
            self.notifier.warning("Could not initiate download: character path missing.")
            return None

        logger.debug("Custom content import started: %s", identifier)
        try:
            response = await self.client.request_import(identifier)
        except (ChubAPIError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Custom content import failed: %s", e)
            self.notifier.info(
                "Click to go to the character page",
                "Custom content import failed",
                action_url=f"{CHUB_MANUAL_URL}/{identifier}",
            )
            return None

        file = self._to_file(identifier, response)
        if file is None:
            return None

        result = self.ingestors[file.kind](file)
        if inspect.isawaitable(result):
            await result
        logger.info("Imported %s via %s", file.filename, response.endpoint)
        return file
