"""Reference backend implementing the console's REST contract."""

from fleet_console.server.app import create_app
from fleet_console.server.database import Database

__all__ = ["Database", "create_app"]
