"""Headless console pages: list views, dialogs, toasts."""

from fleet_console.console.app import AdminConsole, create_http_client
from fleet_console.console.boundary import MutationBoundary, MutationOutcome
from fleet_console.console.forms import FormDialog
from fleet_console.console.notifications import Notifier, Toast, ToastVariant
from fleet_console.console.views import ListView, ProfileView

__all__ = [
    "AdminConsole",
    "FormDialog",
    "ListView",
    "MutationBoundary",
    "MutationOutcome",
    "Notifier",
    "ProfileView",
    "Toast",
    "ToastVariant",
    "create_http_client",
]
