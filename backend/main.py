"""
EduList - operator command line.

Drives the account approval lifecycle against the configured record
store: register and log in as a user or institute, inspect the
persisted session, check route access, and, logged in as the
administrator, review and decide pending accounts.

Exit codes: 0 on success, 1 on a business failure, 2 when the record
store could not complete a read or write.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt
from rich.table import Table

from container import ServiceContainer, get_container
from shared.config import get_settings
from shared.exceptions import StorageError
from shared.models import AccountStatus, Identity, OperationResult, Role
from modules.access.gate import decide
from modules.accounts.models import RegistrationRequest
from modules.approvals.models import ApprovalResult

console = Console()
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_STORAGE = 2


# -----------------------------------------------------------------------------
# Output helpers
# -----------------------------------------------------------------------------


def _fmt(value: object) -> str:
    if value is None:
        return "-"
    if hasattr(value, "value"):
        return str(value.value)
    if hasattr(value, "isoformat"):
        return value.isoformat(timespec="seconds")
    return str(value)


def print_identity(identity: Identity) -> None:
    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    table.add_row("ID", identity.id)
    table.add_row("Name", identity.name)
    table.add_row("Email", identity.email)
    table.add_row("Role", _fmt(identity.role))
    table.add_row("Status", _fmt(identity.status) if identity.role != Role.ADMIN else "n/a")
    if identity.rejection_reason:
        table.add_row("Rejection reason", identity.rejection_reason)
    if identity.permissions:
        table.add_row("Permissions", ", ".join(identity.permissions))
    table.add_row("Last login", _fmt(identity.last_login))
    table.add_row("Login count", str(identity.login_count))
    console.print(table)


def print_accounts(identities: list[Identity], title: str) -> None:
    table = Table(title=title)
    table.add_column("ID")
    table.add_column("Role")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Registered")
    for identity in identities:
        table.add_row(
            identity.id,
            _fmt(identity.role),
            identity.name,
            identity.email,
            _fmt(identity.created_at),
        )
    console.print(table)


def print_failure(result: OperationResult) -> int:
    console.print(f"[red]Error:[/red] {result.message} [dim]({_fmt(result.error)})[/dim]")
    return EXIT_FAILURE


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------


def require_admin(container: ServiceContainer) -> Optional[Identity]:
    """Gate administrator commands through the access gate."""
    identity = container.sessions.current()
    paths = container.route_paths
    decision = decide(
        identity,
        required_roles={Role.ADMIN},
        requested_path=paths.admin_home,
        paths=paths,
    )
    if not decision.allowed:
        console.print(
            f"[red]Access denied:[/red] administrator login required "
            f"[dim](redirect to {decision.target or '-'})[/dim]"
        )
        return None
    return identity


def cmd_register(container: ServiceContainer, args: argparse.Namespace) -> int:
    password = args.password or Prompt.ask("Password", password=True)
    profile = dict(item.split("=", 1) for item in args.profile)
    result = container.accounts.register(
        Role(args.role),
        RegistrationRequest(
            name=args.name,
            email=args.email,
            password=password,
            profile=profile,
        ),
    )
    if not result.success:
        return print_failure(result)

    # Keep the new account in session so wait-approval can follow it
    container.sessions.establish(result.identity)
    console.print(f"[green]{result.message}[/green]")
    print_identity(result.identity)
    return EXIT_OK


def cmd_login(container: ServiceContainer, args: argparse.Namespace) -> int:
    password = args.password or Prompt.ask("Password", password=True)
    expected = Role(args.portal) if args.portal else None
    result = container.accounts.authenticate(args.email, password, expected)
    if not result.success:
        if result.rejection_reason:
            console.print(f"[yellow]Rejection reason:[/yellow] {result.rejection_reason}")
        return print_failure(result)

    container.sessions.establish(result.identity)
    console.print(f"[green]Welcome, {result.identity.name}![/green]")
    return EXIT_OK


def cmd_logout(container: ServiceContainer, args: argparse.Namespace) -> int:
    container.sessions.clear()
    console.print("Logged out.")
    return EXIT_OK


def cmd_whoami(container: ServiceContainer, args: argparse.Namespace) -> int:
    sessions = container.sessions
    if args.refresh:
        sessions.refresh()
    identity = sessions.current()
    if identity is None:
        console.print("[dim]Not logged in.[/dim]")
        return EXIT_FAILURE
    print_identity(identity)
    return EXIT_OK


def cmd_pending(container: ServiceContainer, args: argparse.Namespace) -> int:
    if require_admin(container) is None:
        return EXIT_FAILURE
    role = Role(args.role) if args.role else None
    pending = container.approvals.list_pending(role)
    if not pending:
        console.print("[dim]No pending approvals.[/dim]")
        return EXIT_OK
    print_accounts(pending, f"Pending approvals ({len(pending)})")
    return EXIT_OK


def _report_decision(result: ApprovalResult) -> int:
    if not result.success:
        return print_failure(result)
    style = "green" if result.changed else "dim"
    console.print(f"[{style}]{result.message}[/{style}]")
    print_identity(result.identity)
    return EXIT_OK


def cmd_approve(container: ServiceContainer, args: argparse.Namespace) -> int:
    if require_admin(container) is None:
        return EXIT_FAILURE
    return _report_decision(container.approvals.approve(args.account_id, notes=args.notes))


def cmd_reject(container: ServiceContainer, args: argparse.Namespace) -> int:
    if require_admin(container) is None:
        return EXIT_FAILURE
    return _report_decision(
        container.approvals.reject(args.account_id, args.reason, notes=args.notes)
    )


def cmd_stats(container: ServiceContainer, args: argparse.Namespace) -> int:
    if require_admin(container) is None:
        return EXIT_FAILURE
    stats = container.approvals.get_stats()
    table = Table(title="Dashboard")
    table.add_column("")
    for column in ("Total", "Pending", "Approved", "Rejected"):
        table.add_column(column, justify="right")
    for label, row in (("Users", stats.users), ("Institutes", stats.institutes)):
        table.add_row(label, str(row.total), str(row.pending), str(row.approved), str(row.rejected))
    console.print(table)
    console.print(
        f"Courses: {stats.total_courses}  Reviews: {stats.total_reviews}  "
        f"Enquiries: {stats.total_enquiries}"
    )
    return EXIT_OK


def cmd_check(container: ServiceContainer, args: argparse.Namespace) -> int:
    decision = decide(
        container.sessions.current(),
        required_roles={Role(r) for r in args.role},
        require_approval=args.require_approval,
        requested_path=args.path,
        paths=container.route_paths,
    )
    line = decision.kind.value.upper()
    if decision.target:
        line += f" -> {decision.target}"
    if decision.reason:
        line += f" [dim]({decision.reason})[/dim]"
    console.print(line)
    return EXIT_OK if decision.allowed else EXIT_FAILURE


async def _wait_for_approval(container: ServiceContainer, interval: Optional[float]) -> bool:
    poller = container.sessions.watch_approval(
        interval,
        on_approved=lambda identity: console.print(
            f"[green]Account {identity.id} has been approved.[/green]"
        ),
    )
    console.print(f"[dim]Checking approval status every {poller.interval:g}s...[/dim]")
    return await poller.wait()


def _print_rejection(identity: Identity) -> None:
    console.print(
        f"[red]Application rejected:[/red] {identity.rejection_reason or 'no reason given'}"
    )


def cmd_wait_approval(container: ServiceContainer, args: argparse.Namespace) -> int:
    sessions = container.sessions
    identity = sessions.current()
    if identity is None:
        console.print("[dim]Not logged in.[/dim]")
        return EXIT_FAILURE
    if sessions.refresh():
        console.print("[green]Account is approved.[/green]")
        return EXIT_OK
    identity = sessions.current()
    if identity is None:
        console.print("[yellow]Session ended before approval.[/yellow]")
        return EXIT_FAILURE
    if identity.status == AccountStatus.REJECTED:
        _print_rejection(identity)
        return EXIT_FAILURE

    try:
        approved = asyncio.run(_wait_for_approval(container, args.interval))
    except KeyboardInterrupt:
        console.print("[dim]Stopped waiting.[/dim]")
        return EXIT_FAILURE

    if approved:
        return EXIT_OK
    current = sessions.current()
    if current is not None and current.status == AccountStatus.REJECTED:
        _print_rejection(current)
    else:
        console.print("[yellow]Session ended before approval.[/yellow]")
    return EXIT_FAILURE


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edulist",
        description="EduList account approval and access control",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("register", help="Register a user or institute account")
    p.add_argument("--role", choices=[Role.USER.value, Role.INSTITUTE.value], default=Role.USER.value)
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--password", help="Prompted for when omitted")
    p.add_argument(
        "--profile", "-p",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        type=_key_value,
        help="Profile field (repeatable), e.g. category=Engineering",
    )
    p.set_defaults(handler=cmd_register)

    p = sub.add_parser("login", help="Log in and persist the session")
    p.add_argument("--email", required=True)
    p.add_argument("--password", help="Prompted for when omitted")
    p.add_argument("--portal", choices=[r.value for r in Role], help="Portal role to log in through")
    p.set_defaults(handler=cmd_login)

    p = sub.add_parser("logout", help="End the session")
    p.set_defaults(handler=cmd_logout)

    p = sub.add_parser("whoami", help="Show the session identity")
    p.add_argument("--refresh", action="store_true", help="Re-read the account status first")
    p.set_defaults(handler=cmd_whoami)

    p = sub.add_parser("pending", help="List accounts awaiting approval (admin)")
    p.add_argument("--role", choices=[Role.USER.value, Role.INSTITUTE.value])
    p.set_defaults(handler=cmd_pending)

    p = sub.add_parser("approve", help="Approve an account (admin)")
    p.add_argument("account_id")
    p.add_argument("--notes")
    p.set_defaults(handler=cmd_approve)

    p = sub.add_parser("reject", help="Reject an account (admin)")
    p.add_argument("account_id")
    p.add_argument("--reason", required=True)
    p.add_argument("--notes")
    p.set_defaults(handler=cmd_reject)

    p = sub.add_parser("stats", help="Show dashboard counts (admin)")
    p.set_defaults(handler=cmd_stats)

    p = sub.add_parser("check", help="Check access to a path for the session")
    p.add_argument("path")
    p.add_argument(
        "--role",
        action="append",
        default=[],
        choices=[r.value for r in Role],
        help="Role allowed on the path (repeatable)",
    )
    p.add_argument("--require-approval", action="store_true")
    p.set_defaults(handler=cmd_check)

    p = sub.add_parser("wait-approval", help="Poll until the session account is approved")
    p.add_argument("--interval", type=float, help="Seconds between checks")
    p.set_defaults(handler=cmd_wait_approval)

    return parser


def _key_value(raw: str) -> str:
    if "=" not in raw:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    return raw


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def main(argv: Optional[list[str]] = None, container: Optional[ServiceContainer] = None) -> int:
    args = build_parser().parse_args(argv)
    container = container or get_container()
    try:
        container.sessions.rehydrate()
        return args.handler(container, args)
    except StorageError as e:
        logger.error("Storage failure: %s", e.message)
        console.print(f"[red]Storage failure:[/red] {e.message}")
        return EXIT_STORAGE


def cli() -> None:
    configure_logging(get_settings().log_level)
    sys.exit(main())


if __name__ == "__main__":
    cli()
