"""CLI for profile management and form structure operations.

Usage:
    FORMS_PROFILE=local form-drafts connect
    form-drafts status
    form-drafts profiles
    form-drafts forms
    form-drafts show <form-id>
    form-drafts publish <form-id> --base-url https://forms.example.com
    form-drafts public <slug>

Commands:
    connect    - Check a profile's store and make it the active profile
    status     - Show the active profile
    profiles   - List profiles from forms.toml
    forms      - List forms with their publication state
    show       - Show a form's working view (drafts and staged deletions)
    public     - Show the published structure served at a slug
    publish    - Publish a form's drafts
    unpublish  - Take a form offline
    duplicate  - Copy a form's working view into a new form
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from form_drafts.builder import FormBuilder, PublicForms
from form_drafts.config.loader import load_config
from form_drafts.errors import FormEngineError
from form_drafts.factory import (
    ProfileNotFoundError,
    connect_and_validate,
    get_store,
    read_profile_lock,
)
from form_drafts.structure.models import Field
from form_drafts.structure.store import StructureStore

console = Console()

# Errors reported as a one-line message with exit code 1
_HANDLED_ERRORS = (
    FormEngineError,
    ProfileNotFoundError,
    FileNotFoundError,
    KeyError,
    ImportError,
    ValueError,
)


def _config_path(args: argparse.Namespace) -> Path | None:
    value = getattr(args, "config", None)
    return Path(value) if value else None


async def _open_store(args: argparse.Namespace) -> StructureStore:
    return await get_store(
        env_prefix=getattr(args, "env_prefix", ""),
        config_path=_config_path(args),
    )


def _field_state(field: Field) -> str:
    if field.pending_delete:
        return "[red]pending delete[/red]"
    if field.is_edit_shadow:
        return "[yellow]edited[/yellow]"
    if field.is_draft:
        return "[green]new[/green]"
    return ""


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_connect(args: argparse.Namespace) -> int:
    """Async implementation for connect command.

    Returns:
        0 on success, 1 on failure.
    """
    previous_profile = read_profile_lock()

    console.print("Connecting to structure store...", style="dim")

    result = await connect_and_validate(
        profile_name=getattr(args, "profile", None),
        env_prefix=getattr(args, "env_prefix", ""),
        config_path=_config_path(args),
    )

    if not result.success:
        console.print()
        console.print(f"[bold red]x[/bold red] {result.error}")
        if result.schema_report:
            console.print("\n[bold]Schema validation report:[/bold]")
            console.print(result.schema_report.format_report())
        return 1

    console.print()
    console.print(
        f"[bold green]v[/bold green] Connected to profile: "
        f"[bold cyan]{result.profile_name}[/bold cyan] ({result.provider})"
    )
    if result.schema_valid:
        console.print("  Schema validation: [green]PASSED[/green]")
    else:
        console.print("  Schema validation: [dim]skipped[/dim]")

    if previous_profile and previous_profile != result.profile_name:
        console.print(
            f"\n[dim]Switched from[/dim] [bold]{previous_profile}[/bold] "
            f"[dim]to[/dim] [bold cyan]{result.profile_name}[/bold cyan]"
        )
    return 0


async def _async_forms(args: argparse.Namespace) -> int:
    store = await _open_store(args)
    try:
        forms = await FormBuilder(store).list_forms()
    finally:
        await store.close()

    table = Table(title="Forms", show_header=True, header_style="bold")
    table.add_column("Id", style="dim")
    table.add_column("Title")
    table.add_column("Slug")
    table.add_column("Published")
    for form in forms:
        table.add_row(
            form.id,
            form.title,
            form.slug or "",
            "[green]yes[/green]" if form.is_published else "no",
        )
    console.print(table)
    return 0


async def _async_show(args: argparse.Namespace) -> int:
    """Render the working view one table per step."""
    store = await _open_store(args)
    try:
        view = await FormBuilder(store).get_working_view(args.form_id)
    finally:
        await store.close()

    status = "published" if view.form.is_published else "unpublished"
    console.print(f"[bold]{view.form.title}[/bold] [dim]({status})[/dim]")
    if view.has_unpublished_changes:
        console.print("[yellow]Has unpublished changes[/yellow]")

    for step in view.steps:
        title = step.title
        if step.pending_delete:
            title += " [red](pending delete)[/red]"
        elif step.is_draft:
            title += " [green](new)[/green]"
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Type")
        table.add_column("Label")
        table.add_column("Id", style="dim")
        table.add_column("State")
        for field in view.fields_for(step.id):
            table.add_row(
                str(field.field_order),
                field.field_type,
                field.label or "",
                field.id,
                _field_state(field),
            )
        console.print(table)
    return 0


async def _async_public(args: argparse.Namespace) -> int:
    store = await _open_store(args)
    try:
        form = await PublicForms(store).get_public_form(args.slug)
    finally:
        await store.close()

    console.print(f"[bold]{form.title}[/bold] [dim]/f/{form.slug}[/dim]")
    for step in form.steps:
        table = Table(title=step.title, show_header=True, header_style="bold")
        table.add_column("Type")
        table.add_column("Label")
        table.add_column("Required")
        for field in step.fields:
            table.add_row(field.field_type, field.label or "", "yes" if field.is_required else "")
        console.print(table)
    return 0


async def _async_publish(args: argparse.Namespace) -> int:
    store = await _open_store(args)
    try:
        config = load_config(_config_path(args))
        result = await FormBuilder(store, config.slugs).publish(args.form_id)
    finally:
        await store.close()

    console.print(
        f"[bold green]v[/bold green] Published [bold]{result.form.title}[/bold]"
    )
    table = Table(show_header=False)
    table.add_column("Key", style="dim")
    table.add_column("Value")
    table.add_row("Public path", result.public_path)
    if args.base_url:
        table.add_row("Public URL", result.public_url(args.base_url))
    table.add_row("Fields merged", str(result.merged_fields))
    table.add_row("Fields promoted", str(result.promoted_fields))
    table.add_row("Fields purged", str(result.purged_fields))
    table.add_row("Steps promoted", str(result.promoted_steps))
    table.add_row("Steps purged", str(result.purged_steps))
    console.print(table)
    return 0


async def _async_unpublish(args: argparse.Namespace) -> int:
    store = await _open_store(args)
    try:
        form = await FormBuilder(store).unpublish(args.form_id)
    finally:
        await store.close()

    console.print(f"[bold green]v[/bold green] Unpublished [bold]{form.title}[/bold]")
    return 0


async def _async_duplicate(args: argparse.Namespace) -> int:
    store = await _open_store(args)
    try:
        copy = await FormBuilder(store).duplicate_form(args.form_id)
    finally:
        await store.close()

    console.print(
        f"[bold green]v[/bold green] Created [bold]{copy.title}[/bold] "
        f"[dim]{copy.id}[/dim]"
    )
    return 0


def _run(coro_fn, args: argparse.Namespace) -> int:
    """Run an async command, reporting engine and configuration errors."""
    try:
        return asyncio.run(coro_fn(args))
    except _HANDLED_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1


# ============================================================================
# Sync command wrappers
# ============================================================================


def cmd_connect(args: argparse.Namespace) -> int:
    """Check a profile and persist it as the active profile."""
    return _run(_async_connect, args)


def cmd_status(args: argparse.Namespace) -> int:
    """Show the active profile.

    Reads only local files (lock file and TOML config).

    Returns:
        0 always (informational command).
    """
    profile = read_profile_lock()
    if not profile:
        console.print("[yellow]No validated profile.[/yellow]")
        console.print(
            "[dim]Run:[/dim] [cyan]FORMS_PROFILE=<name> form-drafts connect[/cyan]"
        )
        return 0

    table = Table(title="Connection Status", show_header=False)
    table.add_column("Key", style="dim")
    table.add_column("Value")
    table.add_row("Current profile", f"[bold cyan]{profile}[/bold cyan]")
    table.add_row("Profile source", ".forms-profile (validated)")
    try:
        config = load_config(_config_path(args))
        if profile in config.profiles:
            p = config.profiles[profile]
            table.add_row("Provider", p.provider)
            if p.description:
                table.add_row("Description", p.description)
    except FileNotFoundError:
        table.add_row("Warning", "[yellow]forms.toml not found[/yellow]")
    console.print(table)
    return 0


def cmd_profiles(args: argparse.Namespace) -> int:
    """List profiles from forms.toml.

    Returns:
        0 on success, 1 if forms.toml not found.
    """
    try:
        config = load_config(_config_path(args))
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    current = read_profile_lock()

    table = Table(title="Store Profiles", show_header=True, header_style="bold")
    table.add_column("", width=2)
    table.add_column("Profile")
    table.add_column("Provider")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        marker = "[bold green]*[/bold green]" if name == current else " "
        table.add_row(
            marker,
            f"[bold cyan]{name}[/bold cyan]" if name == current else name,
            profile.provider,
            profile.description or "",
        )

    console.print(table)
    if current:
        console.print("\n[bold green]*[/bold green] = current profile")
    return 0


def cmd_forms(args: argparse.Namespace) -> int:
    return _run(_async_forms, args)


def cmd_show(args: argparse.Namespace) -> int:
    return _run(_async_show, args)


def cmd_public(args: argparse.Namespace) -> int:
    return _run(_async_public, args)


def cmd_publish(args: argparse.Namespace) -> int:
    return _run(_async_publish, args)


def cmd_unpublish(args: argparse.Namespace) -> int:
    return _run(_async_unpublish, args)


def cmd_duplicate(args: argparse.Namespace) -> int:
    return _run(_async_duplicate, args)


# ============================================================================
# Main entry point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="form-drafts",
        description="Draft, publish and inspect multi-step form structures",
    )

    parser.add_argument(
        "--env-prefix",
        default="",
        help=(
            "Prefix for environment variable lookup "
            "(e.g., --env-prefix APP_ reads APP_FORMS_PROFILE)"
        ),
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to forms.toml (default: ./forms.toml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log engine activity",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    p_connect = subparsers.add_parser(
        "connect",
        help="Check a profile's store and make it the active profile",
    )
    p_connect.add_argument("--profile", default=None, help="Profile name from forms.toml")
    p_connect.set_defaults(func=cmd_connect)

    p_status = subparsers.add_parser("status", help="Show the active profile")
    p_status.set_defaults(func=cmd_status)

    p_profiles = subparsers.add_parser("profiles", help="List available profiles")
    p_profiles.set_defaults(func=cmd_profiles)

    p_forms = subparsers.add_parser("forms", help="List forms")
    p_forms.set_defaults(func=cmd_forms)

    p_show = subparsers.add_parser("show", help="Show a form's working view")
    p_show.add_argument("form_id")
    p_show.set_defaults(func=cmd_show)

    p_public = subparsers.add_parser("public", help="Show the published form at a slug")
    p_public.add_argument("slug")
    p_public.set_defaults(func=cmd_public)

    p_publish = subparsers.add_parser("publish", help="Publish a form's drafts")
    p_publish.add_argument("form_id")
    p_publish.add_argument(
        "--base-url",
        default=None,
        help="Origin used to print the full public URL",
    )
    p_publish.set_defaults(func=cmd_publish)

    p_unpublish = subparsers.add_parser("unpublish", help="Take a form offline")
    p_unpublish.add_argument("form_id")
    p_unpublish.set_defaults(func=cmd_unpublish)

    p_duplicate = subparsers.add_parser("duplicate", help="Copy a form into a new draft form")
    p_duplicate.add_argument("form_id")
    p_duplicate.set_defaults(func=cmd_duplicate)

    return parser


def main() -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
