"""Mutation error boundary."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable

from fleet_console.client.errors import ConsoleError
from fleet_console.console.notifications import Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationOutcome:
    """Result of a mutation run through the boundary."""

    ok: bool
    data: Any = None
    error: ConsoleError | None = None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error else None


class MutationBoundary:
    """Runs mutations and turns failures into toasts.

    Console errors never escape the boundary: their message is shown
    verbatim in a destructive toast and returned in the outcome. Anything
    else is a bug and propagates.
    """

    def __init__(self, notifier: Notifier):
        self.notifier = notifier

    async def run(
        self,
        mutation: Awaitable[Any],
        success_title: str | None = None,
        success_description: str = "",
        error_title: str = "Error",
    ) -> MutationOutcome:
        try:
            data = await mutation
        except ConsoleError as e:
            logger.info("Mutation failed (%s): %s", e.status_code, e.message)
            self.notifier.error(error_title, e.message)
            return MutationOutcome(ok=False, error=e)

        if success_title:
            self.notifier.success(success_title, success_description)
        return MutationOutcome(ok=True, data=data)
