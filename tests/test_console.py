"""Tests for toasts, the mutation boundary and form dialogs."""

import pytest

from fleet_console.client.errors import ServerError, ValidationError
from fleet_console.console.boundary import MutationBoundary
from fleet_console.console.forms import FormDialog
from fleet_console.console.notifications import Notifier, ToastVariant


async def succeed(values):
    return {"id": 7, **values}


async def reject(values):
    raise ValidationError("VIN must be exactly 17 characters", status_code=400)


class TestNotifier:
    """Test toast bookkeeping."""

    def test_success_and_error_variants(self):
        notifier = Notifier()
        ok = notifier.success("Success", "Car updated successfully")
        bad = notifier.error("Error", "Failed to update car")

        assert ok.variant == ToastVariant.DEFAULT
        assert bad.is_error
        assert notifier.last is bad
        assert [t.id for t in notifier.toasts] == [ok.id, bad.id]

    def test_limit_drops_oldest(self):
        notifier = Notifier(limit=2)
        for i in range(3):
            notifier.success(f"Toast {i}")
        assert [t.title for t in notifier.toasts] == ["Toast 1", "Toast 2"]

    def test_dismiss(self):
        notifier = Notifier()
        first = notifier.success("One")
        notifier.success("Two")

        notifier.dismiss(first.id)
        assert [t.title for t in notifier.toasts] == ["Two"]

        notifier.dismiss()
        assert notifier.toasts == []

    def test_handler_failure_is_isolated(self):
        notifier = Notifier()
        received = []

        def broken(toast):
            raise RuntimeError("printer gone")

        notifier.on_toast(broken)
        notifier.on_toast(received.append)
        toast = notifier.error("Error", "boom")

        assert received == [toast]

    def test_off_unregisters(self):
        notifier = Notifier()
        received = []
        notifier.on_toast(received.append)
        notifier.off(received.append)
        notifier.success("Quiet")
        assert received == []


class TestMutationBoundary:
    """Test that mutation errors become toasts."""

    async def test_success_toast(self):
        notifier = Notifier()
        outcome = await MutationBoundary(notifier).run(
            succeed({"vin": "X"}), "Success", "Car updated successfully"
        )

        assert outcome.ok
        assert outcome.data["id"] == 7
        assert notifier.last.description == "Car updated successfully"

    async def test_validation_message_shown_verbatim(self):
        notifier = Notifier()
        outcome = await MutationBoundary(notifier).run(reject({}), "Success")

        assert not outcome.ok
        assert outcome.message == "VIN must be exactly 17 characters"
        assert notifier.last.title == "Error"
        assert notifier.last.description == "VIN must be exactly 17 characters"
        assert notifier.last.is_error

    async def test_server_error_toasted(self):
        async def broken():
            raise ServerError("Failed to update car", status_code=500)

        notifier = Notifier()
        outcome = await MutationBoundary(notifier).run(broken())

        assert outcome.message == "Failed to update car"
        assert notifier.last.is_error

    async def test_programming_errors_propagate(self):
        async def buggy():
            raise KeyError("vin")

        with pytest.raises(KeyError):
            await MutationBoundary(Notifier()).run(buggy())

    async def test_no_success_toast_without_title(self):
        notifier = Notifier()
        await MutationBoundary(notifier).run(succeed({}))
        assert notifier.toasts == []


class TestFormDialog:
    """Test dialog state around submits."""

    async def test_successful_submit_closes_and_resets(self):
        notifier = Notifier()
        dialog = FormDialog(MutationBoundary(notifier), succeed, initial={"status": "ACTIVE"})
        dialog.open({"vin": "1HGCM82633A004352"})
        dialog.set_value("mileage", 100)

        outcome = await dialog.submit()

        assert outcome.ok
        assert outcome.data["mileage"] == 100
        assert not dialog.is_open
        assert dialog.values == {"status": "ACTIVE"}

    async def test_failed_submit_keeps_dialog_open(self):
        notifier = Notifier()
        dialog = FormDialog(MutationBoundary(notifier), reject)
        dialog.open({"vin": "SHORT", "makeModel": "Honda Accord"})
        before = dict(dialog.values)

        outcome = await dialog.submit()

        assert not outcome.ok
        assert dialog.is_open
        assert not dialog.is_submitting
        assert dialog.values == before
        assert notifier.last.description == "VIN must be exactly 17 characters"

    def test_open_prefills_over_initial(self):
        dialog = FormDialog(MutationBoundary(Notifier()), succeed, initial={"status": "ACTIVE", "vin": ""})
        dialog.open({"vin": "WDDWJ8EB2KF123456"})

        assert dialog.is_open
        assert dialog.values == {"status": "ACTIVE", "vin": "WDDWJ8EB2KF123456"}

        dialog.close()
        assert dialog.values == {"status": "ACTIVE", "vin": ""}
