"""Fleet console command line interface.

Usage:
    fleet-console serve --seed
    fleet-console cars list --status ACTIVE --search mercedes
    fleet-console cars offboard 12 --reason sold --note "Sold at auction"
    fleet-console employees list --status pending
    fleet-console employees approve 7
    fleet-console rates add 7 27.50 --date 2025-03-01 --pay-type hourly
    fleet-console slack set car_onboarding C0123456 --name fleet-onboarding
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from decimal import Decimal
from typing import Any, Callable

import uvicorn

from fleet_console.client.errors import ConsoleError
from fleet_console.client.query_keys import FilterState
from fleet_console.config import get_settings
from fleet_console.console.app import AdminConsole
from fleet_console.resources.rate_history import current_rate
from fleet_console.resources.records import OffboardReason, SlackFormType
from fleet_console.server.database import Database
from fleet_console.server.seed import seed_demo_data

logger = logging.getLogger(__name__)


def parse_date(s: str) -> date:
    """Parse ISO date string."""
    return date.fromisoformat(s)


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def print_list(records: list[dict[str, Any]], fields: list[str], pagination: Any) -> None:
    """Print records as aligned columns followed by the page summary."""
    rows = [[str(r.get(f) if r.get(f) is not None else "") for f in fields] for r in records]
    widths = [max([len(f)] + [len(row[i]) for row in rows]) for i, f in enumerate(fields)]
    print("  ".join(f.ljust(w) for f, w in zip(fields, widths)))
    for row in rows:
        print("  ".join(v.ljust(w) for v, w in zip(row, widths)))
    if pagination is not None:
        print(
            f"\nShowing {pagination.start_item} to {pagination.end_item} of "
            f"{pagination.total} (page {pagination.page}/{max(1, pagination.total_pages)})"
        )


class ConsoleCli:
    """Fleet console command line interface."""

    def __init__(self, console_factory: Callable[[], AdminConsole] | None = None) -> None:
        self.parser = self._build_parser()
        self.console_factory = console_factory or AdminConsole

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="fleet-console",
            description="Fleet and staffing admin console",
        )
        parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # serve command
        serve = subparsers.add_parser("serve", help="Run the reference backend")
        serve.add_argument("--host", help="Bind address (default: HOST)")
        serve.add_argument("--port", type=int, help="Port (default: PORT)")
        serve.add_argument("--seed", action="store_true", help="Load demo data into an empty database")

        # cars commands
        cars = subparsers.add_parser("cars", help="Car list and offboarding")
        cars_sub = cars.add_subparsers(dest="action", required=True)
        cars_list = cars_sub.add_parser("list", help="List cars")
        self._add_list_arguments(cars_list)
        cars_list.add_argument("--fleet", action="store_true", help="Use fleet statuses (available, in_use, ...)")
        cars_list.add_argument("--client", action="store_true", help="List the signed-in client's cars")
        offboard = cars_sub.add_parser("offboard", help="Take a car out of the fleet")
        offboard.add_argument("car_id", type=int)
        offboard.add_argument(
            "--reason",
            required=True,
            choices=[r.value for r in OffboardReason],
        )
        offboard.add_argument("--note", default="")
        offboard.add_argument("--date", type=parse_date, help="Offboard date (default: today)")

        # employees commands
        employees = subparsers.add_parser("employees", help="Employee registry")
        emp_sub = employees.add_subparsers(dest="action", required=True)
        emp_list = emp_sub.add_parser("list", help="List employees")
        self._add_list_arguments(emp_list)
        approve = emp_sub.add_parser("approve", help="Approve a pending employee")
        approve.add_argument("employee_id", type=int)
        emp_offboard = emp_sub.add_parser("offboard", help="Offboard an employee")
        emp_offboard.add_argument("employee_id", type=int)
        emp_import = emp_sub.add_parser("import", help="Import employees from CSV")
        emp_import.add_argument("csv_path")

        # rates commands
        rates = subparsers.add_parser("rates", help="Employee rate history")
        rates_sub = rates.add_subparsers(dest="action", required=True)
        rates_list = rates_sub.add_parser("list", help="Show rate history")
        rates_list.add_argument("employee_id", type=int)
        rates_add = rates_sub.add_parser("add", help="Add a new current rate")
        rates_add.add_argument("employee_id", type=int)
        rates_add.add_argument("amount", type=Decimal)
        rates_add.add_argument("--date", type=parse_date, default=None, help="Start date (default: today)")
        rates_add.add_argument("--pay-type", choices=["hourly", "salary"], default="hourly")

        # slack commands
        slack = subparsers.add_parser("slack", help="Slack notification settings")
        slack_sub = slack.add_subparsers(dest="action", required=True)
        slack_sub.add_parser("list", help="Show channel per form type")
        slack_set = slack_sub.add_parser("set", help="Set the channel of a form type")
        slack_set.add_argument("form_type", choices=[f.value for f in SlackFormType])
        slack_set.add_argument("channel_id")
        slack_set.add_argument("--name", default=None)
        slack_token = slack_sub.add_parser("token", help="Store the Slack bot token")
        slack_token.add_argument("bot_token")

        return parser

    @staticmethod
    def _add_list_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--status", default="all")
        parser.add_argument("--search", default="")
        parser.add_argument("--page", type=int, default=1)
        parser.add_argument("--limit", type=int, default=None)

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        logging.basicConfig(
            level=logging.DEBUG if parsed.verbose else logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        if not parsed.command:
            self.parser.print_help()
            return 1

        if parsed.command == "serve":
            return self._cmd_serve(parsed)

        handlers: dict[str, Callable[..., Any]] = {
            "cars": self._cmd_cars,
            "employees": self._cmd_employees,
            "rates": self._cmd_rates,
            "slack": self._cmd_slack,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        try:
            return asyncio.run(self._with_console(handler, parsed))
        except ConsoleError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    async def _with_console(self, handler: Callable[..., Any], args: argparse.Namespace) -> int:
        async with self.console_factory() as console:
            return await handler(console, args)

    def _cmd_serve(self, args: argparse.Namespace) -> int:
        """Run the reference backend with uvicorn."""
        settings = get_settings()
        if args.seed:

            async def seed() -> None:
                db = Database(settings.database_url)
                await db.create_all()
                async with db.session() as session:
                    await seed_demo_data(session)
                await db.dispose()

            asyncio.run(seed())

        uvicorn.run(
            "fleet_console.server.app:create_app",
            factory=True,
            host=args.host or settings.HOST,
            port=args.port or settings.PORT,
            reload=settings.DEBUG,
        )
        return 0

    @staticmethod
    def _filters(console: AdminConsole, args: argparse.Namespace) -> FilterState:
        return FilterState(
            status_filter=args.status,
            search_query=args.search,
            page=max(1, args.page),
            items_per_page=args.limit or console.settings.default_page_size,
        )

    async def _cmd_cars(self, console: AdminConsole, args: argparse.Namespace) -> int:
        if args.action == "offboard":
            car = await console.cars.offboard(args.car_id, args.reason, args.note, args.date)
            print_json(car)
            return 0

        filters = self._filters(console, args)
        if args.client:
            envelope = await console.cars.list_for_client(filters)
        else:
            resource = console.fleet_cars if args.fleet else console.cars
            envelope = await resource.list(filters)
        print_list(
            envelope.data,
            ["id", "vin", "makeModel", "licensePlate", "year", "status"],
            envelope.pagination,
        )
        return 0

    async def _cmd_employees(self, console: AdminConsole, args: argparse.Namespace) -> int:
        if args.action == "approve":
            print_json(await console.employees.approve(args.employee_id))
            return 0
        if args.action == "offboard":
            print_json(await console.employees.offboard(args.employee_id))
            return 0
        if args.action == "import":
            with open(args.csv_path, "rb") as f:
                content = f.read()
            summary = await console.employees.import_csv(content, args.csv_path.rsplit("/", 1)[-1])
            print(
                f"Imported {summary.get('successful', 0)} of {summary.get('total', 0)} "
                f"({summary.get('failed', 0)} failed)"
            )
            for error in summary.get("errors", []):
                print(f"  {error}")
            return 0 if not summary.get("failed") else 1

        envelope = await console.employees.list(self._filters(console, args))
        print_list(
            envelope.data,
            [
                "employee_aid",
                "employee_last_name",
                "employee_first_name",
                "employee_email",
                "employee_status",
            ],
            envelope.pagination,
        )
        return 0

    async def _cmd_rates(self, console: AdminConsole, args: argparse.Namespace) -> int:
        if args.action == "add":
            if await console.rates.unpaid_payroll_count() > 0:
                print("On-going payroll: rates cannot be changed right now", file=sys.stderr)
                return 1
            await console.rates.add_rate(
                args.employee_id,
                args.amount,
                args.date or date.today(),
                args.pay_type,
            )

        entries = await console.rates.list(args.employee_id)
        print_list(
            entries,
            [
                "rate_history_amount",
                "rate_history_pay_type",
                "rate_history_effective_start",
                "rate_history_effective_end",
            ],
            None,
        )
        current = current_rate(entries)
        if current is not None:
            print(
                f"Current rate: {current.rate_history_amount:.2f} {current.rate_history_pay_type} "
                f"since {current.effective_start}"
            )
        return 0

    async def _cmd_slack(self, console: AdminConsole, args: argparse.Namespace) -> int:
        if args.action == "set":
            await console.slack.update_channel(args.form_type, args.channel_id, args.name)
        elif args.action == "token":
            await console.slack.save_bot_token(args.bot_token)
            print("Slack bot token saved")
            return 0

        settings = await console.slack.get()
        print(f"Bot token configured: {'yes' if settings.slack_bot_token_configured else 'no'}")
        for form_type in SlackFormType:
            config = settings.channel_for(form_type)
            channel = f"{config.channel_id} ({config.channel_name or '-'})" if config else "-"
            print(f"  {form_type.label:<40} {channel}")
        return 0


def main() -> int:
    """CLI entry point."""
    cli = ConsoleCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
