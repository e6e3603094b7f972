"""Fleet console: list/cache/mutation core of the fleet and staffing admin console."""

__version__ = "0.1.0"
