"""Form dialogs."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping

from fleet_console.console.boundary import MutationBoundary, MutationOutcome

SubmitFn = Callable[[dict[str, Any]], Awaitable[Any]]


class FormDialog:
    """An edit/create dialog: open state, field values, submit.

    A failed submit keeps the dialog open with the values exactly as
    entered; a successful one closes it and resets the values.
    """

    def __init__(
        self,
        boundary: MutationBoundary,
        submit: SubmitFn,
        initial: Mapping[str, Any] | None = None,
        success_title: str | None = None,
        success_description: str = "",
    ):
        self.boundary = boundary
        self.submit_fn = submit
        self.initial = dict(initial or {})
        self.success_title = success_title
        self.success_description = success_description
        self.is_open = False
        self.is_submitting = False
        self.values: dict[str, Any] = dict(self.initial)

    def open(self, values: Mapping[str, Any] | None = None) -> None:
        """Open the dialog, optionally prefilled from a record."""
        self.values = {**self.initial, **(values or {})}
        self.is_open = True

    def close(self) -> None:
        self.is_open = False
        self.values = dict(self.initial)

    def set_value(self, name: str, value: Any) -> None:
        self.values[name] = value

    def update(self, values: Mapping[str, Any]) -> None:
        self.values.update(values)

    async def submit(self) -> MutationOutcome:
        self.is_submitting = True
        try:
            outcome = await self.boundary.run(
                self.submit_fn(dict(self.values)),
                success_title=self.success_title,
                success_description=self.success_description,
            )
        finally:
            self.is_submitting = False
        if outcome.ok:
            self.close()
        return outcome
