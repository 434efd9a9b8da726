"""사용자 알림"""

from dataclasses import dataclass
from typing import Optional, Protocol


class Notifier(Protocol):
    def info(self, message: str, title: str = "", action_url: Optional[str] = None) -> None: ...

    def warning(self, message: str, title: str = "", action_url: Optional[str] = None) -> None: ...

    def error(self, message: str, title: str = "", action_url: Optional[str] = None) -> None: ...


@dataclass
class Notice:
    level: str
    message: str
    title: str = ""
    action_url: Optional[str] = None


class ConsoleNotifier:
    """터미널 출력"""

    ICONS = {"info": "ℹ️ ", "warning": "⚠️ ", "error": "❌"}

    def _print(self, level: str, message: str, title: str, action_url: Optional[str]):
        prefix = f"[{title}] " if title else ""
        print(f"{self.ICONS[level]} {prefix}{message}")
        if action_url:
            print(f"   → {action_url}")

    def info(self, message: str, title: str = "", action_url: Optional[str] = None):
        self._print("info", message, title, action_url)

    def warning(self, message: str, title: str = "", action_url: Optional[str] = None):
        self._print("warning", message, title, action_url)

    def error(self, message: str, title: str = "", action_url: Optional[str] = None):
        self._print("error", message, title, action_url)


class CollectingNotifier:
    """알림을 목록에 모아둠 (API 응답용)"""

    def __init__(self):
        self.notices: list[Notice] = []

    def info(self, message: str, title: str = "", action_url: Optional[str] = None):
        self.notices.append(Notice("info", message, title, action_url))

    def warning(self, message: str, title: str = "", action_url: Optional[str] = None):
        self.notices.append(Notice("warning", message, title, action_url))

    def error(self, message: str, title: str = "", action_url: Optional[str] = None):
        self.notices.append(Notice("error", message, title, action_url))

    def levels(self) -> list[str]:
        return [n.level for n in self.notices]
