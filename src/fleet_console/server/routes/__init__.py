"""API routes."""

from fleet_console.server.routes.auth import router as auth_router
from fleet_console.server.routes.badges import router as badges_router
from fleet_console.server.routes.cars import router as cars_router
from fleet_console.server.routes.employees import router as employees_router
from fleet_console.server.routes.health import router as health_router
from fleet_console.server.routes.payroll import router as payroll_router
from fleet_console.server.routes.settings import router as settings_router

__all__ = [
    "auth_router",
    "badges_router",
    "cars_router",
    "employees_router",
    "health_router",
    "payroll_router",
    "settings_router",
]
