from .client import ChubClient, ChubAPIError
from .models import CharacterRecord, SearchOptions, SortField, ContentKind, ImportableFile
from .options import normalize_options, resolve_page, PageTrigger, OPTION_FIELDS
from .query import encode_query, build_query_string
from .normalizer import normalize_response
from .orchestrator import CharacterSearch
from .download import CharacterDownloader, DirectoryIngestor
from .settings import SettingsStore, DEFAULT_SETTINGS
from .session import SearchSession
from .notify import ConsoleNotifier, CollectingNotifier, Notifier
from .debounce import Debouncer, SEARCH_DEBOUNCE

__all__ = [
    "ChubClient",
    "ChubAPIError",
    "CharacterRecord",
    "SearchOptions",
    "SortField",
    "ContentKind",
    "ImportableFile",
    "normalize_options",
    "resolve_page",
    "PageTrigger",
    "OPTION_FIELDS",
    "encode_query",
    "build_query_string",
    "normalize_response",
    "CharacterSearch",
    "CharacterDownloader",
    "DirectoryIngestor",
    "SettingsStore",
    "DEFAULT_SETTINGS",
    "SearchSession",
    "ConsoleNotifier",
    "CollectingNotifier",
    "Notifier",
    "Debouncer",
    "SEARCH_DEBOUNCE",
]
