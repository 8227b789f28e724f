"""User-facing notifications (toasts) raised by controllers."""

from dataclasses import dataclass
from typing import Literal, Protocol


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


@dataclass
class Toast:
    level: Literal["success", "error", "info"]
    message: str


class ToastQueue:
    """Collects toasts until the web layer renders and drains them."""

    def __init__(self) -> None:
        self._toasts: list[Toast] = []

    def success(self, message: str) -> None:
        self._toasts.append(Toast("success", message))

    def error(self, message: str) -> None:
        self._toasts.append(Toast("error", message))

    def info(self, message: str) -> None:
        self._toasts.append(Toast("info", message))

    def peek(self) -> list[Toast]:
        return list(self._toasts)

    def drain(self) -> list[Toast]:
        """Return pending toasts and forget them."""
        toasts, self._toasts = self._toasts, []
        return toasts

    def __len__(self) -> int:
        return len(self._toasts)
