"""Payslip engine command line interface.

Provides operational tools for:
- Default deduction bootstrap
- Payslip generation for a period
- Bulk approval followed by employee notification
- Retrying undelivered notifications

Usage:
    python -m payslip_engine.cli init-deductions
    python -m payslip_engine.cli generate --month 3 --year 2024
    python -m payslip_engine.cli approve-all --month 3 --year 2024
    python -m payslip_engine.cli send-pending
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Awaitable, Callable, TypeVar

from payslip_engine.config import get_settings
from payslip_engine.database import create_all, dispose_db, get_session
from payslip_engine.notifications import MailTransport, SmtpMailTransport, StubMailTransport
from payslip_engine.services import (
    ApprovalService,
    DeductionService,
    DispatchReport,
    NotificationService,
    PayslipService,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_month(s: str) -> int:
    """Parse a month number between 1 and 12."""
    month = int(s)
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"month must be between 1 and 12, got {month}")
    return month


def parse_year(s: str) -> int:
    """Parse a year of 2000 or later."""
    year = int(s)
    if year < 2000:
        raise argparse.ArgumentTypeError(f"year must be 2000 or later, got {year}")
    return year


class PayslipCli:
    """Payslip engine command line interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m payslip_engine.cli",
            description="Payslip engine operational tools",
        )
        parser.add_argument(
            "--log-level",
            type=str,
            help="Override LOG_LEVEL for this run",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        subparsers.add_parser(
            "init-deductions",
            help="Insert the mandatory deduction rules that are missing",
        )

        generate = subparsers.add_parser(
            "generate",
            help="Generate payslips for all active employments",
        )
        self._add_period_arguments(generate)
        generate.add_argument(
            "--no-bootstrap",
            action="store_true",
            help="Fail instead of inserting missing default deductions",
        )

        approve = subparsers.add_parser(
            "approve-all",
            help="Approve every payslip of a period and notify employees",
        )
        self._add_period_arguments(approve)
        self._add_mail_arguments(approve)
        approve.add_argument(
            "--deduplicate",
            action="store_true",
            help="Skip employees already messaged for the period",
        )

        send = subparsers.add_parser(
            "send-pending",
            help="Retry delivery of every PENDING message",
        )
        self._add_mail_arguments(send)

        return parser

    @staticmethod
    def _add_period_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--month", type=parse_month, required=True, help="Month (1-12)")
        parser.add_argument("--year", type=parse_year, required=True, help="Year (2000+)")

    @staticmethod
    def _add_mail_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--stub-mail",
            action="store_true",
            help="Record messages in memory instead of sending them over SMTP",
        )

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        settings = get_settings()
        logging.basicConfig(
            level=(parsed.log_level or settings.log_level).upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        handlers: dict[str, Callable[[argparse.Namespace], int]] = {
            "init-deductions": self._cmd_init_deductions,
            "generate": self._cmd_generate,
            "approve-all": self._cmd_approve_all,
            "send-pending": self._cmd_send_pending,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _cmd_init_deductions(self, args: argparse.Namespace) -> int:
        """Insert missing default deductions."""

        async def _run() -> int:
            async with get_session() as session:
                return await DeductionService(session).upsert_defaults()

        inserted = self._execute(_run)
        print(f"Inserted {inserted} default deductions.")
        return 0

    def _cmd_generate(self, args: argparse.Namespace) -> int:
        """Generate payslips for a period."""
        bootstrap = get_settings().bootstrap_deductions and not args.no_bootstrap

        async def _run() -> list[tuple[str, str]]:
            async with get_session() as session:
                service = PayslipService(session, bootstrap_deductions=bootstrap)
                payslips = await service.generate(args.month, args.year)
                return [(p.employee.email, f"{p.net_salary:.2f}") for p in payslips]

        created = self._execute(_run)
        print(f"Generated {len(created)} payslips for {args.month}/{args.year}")
        for email, net in created:
            print(f"  {email}: net {net}")
        return 0

    def _cmd_approve_all(self, args: argparse.Namespace) -> int:
        """Approve a period, generate messages and send them."""
        transport = self._transport(args)

        async def _run() -> tuple[int, int, DispatchReport]:
            async with get_session() as session:
                payslips = await ApprovalService(session, actor="cli").approve_all(
                    args.month, args.year
                )
            async with get_session() as session:
                notifications = NotificationService(session, transport=transport)
                messages = await notifications.generate_messages(
                    args.month, args.year, deduplicate=args.deduplicate
                )
            async with get_session() as session:
                report = await NotificationService(session, transport=transport).send_pending()
            return len(payslips), len(messages), report

        approved, created, report = self._execute(_run)
        print(f"Approved {approved} payslips for {args.month}/{args.year}")
        print(f"Created {created} messages")
        return self._print_report(report)

    def _cmd_send_pending(self, args: argparse.Namespace) -> int:
        """Retry every PENDING message."""
        transport = self._transport(args)

        async def _run() -> DispatchReport:
            async with get_session() as session:
                return await NotificationService(session, transport=transport).send_pending()

        return self._print_report(self._execute(_run))

    @staticmethod
    def _transport(args: argparse.Namespace) -> MailTransport:
        if args.stub_mail:
            return StubMailTransport()
        return SmtpMailTransport(get_settings())

    @staticmethod
    def _print_report(report: DispatchReport) -> int:
        print(f"Sent {report.sent_count} messages, {report.failed_count} failed")
        for result in report.failed:
            print(f"  - {result.to_email}: {result.error}")
        return 1 if report.failed_count else 0

    @staticmethod
    def _execute(func: Callable[[], Awaitable[T]]) -> T:
        async def _wrapped() -> T:
            try:
                await create_all()
                return await func()
            finally:
                await dispose_db()

        return asyncio.run(_wrapped())


def main() -> int:
    """CLI entry point."""
    cli = PayslipCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
