"""Transient toast notifications.

The notifier keeps the toasts currently on screen and forwards every new
toast to registered handlers (a terminal printer, a test recorder). Handlers
are isolated: if one fails, the others still receive the toast.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class ToastVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Toast:
    """One notification."""

    id: int
    title: str
    description: str = ""
    variant: ToastVariant = ToastVariant.DEFAULT
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_error(self) -> bool:
        return self.variant == ToastVariant.DESTRUCTIVE


ToastHandler = Callable[[Toast], None]


class Notifier:
    """Holds visible toasts, newest last.

    Usage:
        notifier = Notifier()
        notifier.on_toast(print)
        notifier.error("Error", "VIN must be exactly 17 characters")
    """

    def __init__(self, limit: int = 5) -> None:
        self.limit = limit
        self._toasts: list[Toast] = []
        self._handlers: list[ToastHandler] = []
        self._ids = itertools.count(1)

    @property
    def toasts(self) -> list[Toast]:
        return list(self._toasts)

    @property
    def last(self) -> Toast | None:
        return self._toasts[-1] if self._toasts else None

    def on_toast(self, handler: ToastHandler) -> None:
        self._handlers.append(handler)

    def off(self, handler: ToastHandler) -> None:
        self._handlers = [h for h in self._handlers if h != handler]

    def toast(
        self,
        title: str,
        description: str = "",
        variant: ToastVariant = ToastVariant.DEFAULT,
    ) -> Toast:
        """Show a toast; the oldest one is dropped past ``limit``."""
        toast = Toast(next(self._ids), title, description, variant)
        self._toasts.append(toast)
        if len(self._toasts) > self.limit:
            self._toasts = self._toasts[-self.limit :]

        for handler in self._handlers:
            try:
                handler(toast)
            except Exception:
                logger.exception("Toast handler %s failed", handler)
        return toast

    def success(self, title: str, description: str = "") -> Toast:
        return self.toast(title, description)

    def error(self, title: str, description: str = "") -> Toast:
        return self.toast(title, description, ToastVariant.DESTRUCTIVE)

    def dismiss(self, toast_id: int | None = None) -> None:
        """Dismiss one toast, or all of them."""
        if toast_id is None:
            self._toasts = []
        else:
            self._toasts = [t for t in self._toasts if t.id != toast_id]
