"""
Command-line interface for termform.
"""

from __future__ import annotations

import argparse
import json
import os
import shlex
import sys
from pathlib import Path

import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from termform.app import App
from termform.config import CONFIG_ENV_VAR, FormConfig, default_config_path, load_config
from termform.errors import TermformError
from termform.events import RunResult
from termform.form import Form
from termform.logging import get_log_buffer, get_logger, setup_logging
from termform.model import DIGITS
from termform.parser import load_form
from termform.tui.terminal import Terminal

console = Console()
err_console = Console(stderr=True)

logger = get_logger("cli")

EXIT_SUBMITTED = 0
EXIT_ABORTED = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Full-screen terminal forms for shell scripts",
        prog="termform",
    )

    # Global options
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output (debug logging)",
    )
    parser.add_argument(
        "-c",
        "--config",
        help=f"Config file (default: ${CONFIG_ENV_VAR} or {default_config_path()})",
    )
    parser.add_argument(
        "--log-file",
        help="Write log records to this file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Show a form and print the submitted values")
    run_parser.add_argument("formfile", help="Form definition file")
    run_parser.add_argument(
        "--format",
        choices=["shell", "json"],
        default="shell",
        help="Output format (default: shell)",
    )

    # Check command
    check_parser = subparsers.add_parser("check", help="Validate a form definition file")
    check_parser.add_argument("formfile", help="Form definition file")

    # Config command
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_command")
    config_subparsers.add_parser("show", help="Show current configuration")
    config_subparsers.add_parser("path", help="Show config file paths")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except TermformError as e:
        err_console.print(f"[red]Config error: {e}[/red]")
        sys.exit(EXIT_ERROR)

    level = "DEBUG" if args.verbose else config.log.level
    log_file = args.log_file or config.log.file

    if args.command == "run":
        # The form owns the screen; keep log records off it.
        setup_logging(level, file=log_file, console=False)
        sys.exit(cmd_run(args, config))
    elif args.command == "check":
        setup_logging(level, file=log_file)
        sys.exit(cmd_check(args, config))
    elif args.command == "config":
        setup_logging(level, file=log_file)
        cmd_config(args, config)
    else:
        parser.print_help()


def _load(path: str, config: FormConfig) -> Form | None:
    try:
        return load_form(path, config)
    except OSError as e:
        err_console.print(f"[red]Cannot read {path}: {e.strerror or e}[/red]")
    except TermformError as e:
        err_console.print(f"[red]{path}: {e}[/red]")
    return None


def format_shell(values: list[tuple[str, str]]) -> str:
    """``name=value`` lines, values quoted for ``eval`` in a POSIX shell."""
    return "".join(f"{name}={shlex.quote(value)}\n" for name, value in values)


def format_json(values: list[tuple[str, str]]) -> str:
    return json.dumps(dict(values), ensure_ascii=False) + "\n"


def cmd_run(args: argparse.Namespace, config: FormConfig) -> int:
    """Show the form; print the values on submit."""
    form = _load(args.formfile, config)
    if form is None:
        return EXIT_ERROR

    with Terminal() as terminal:
        app = App(config, terminal, keybindings=form.keybindings, log_buffer=get_log_buffer())
        result: RunResult = app.run(form)

    if not result.submitted:
        logger.info("Form aborted")
        return EXIT_ABORTED

    if args.format == "json":
        sys.stdout.write(format_json(result.values))
    else:
        sys.stdout.write(format_shell(result.values))
    sys.stdout.flush()
    return EXIT_SUBMITTED


def cmd_check(args: argparse.Namespace, config: FormConfig) -> int:
    """Parse a form file and list its fields."""
    form = _load(args.formfile, config)
    if form is None:
        return EXIT_ERROR

    table = Table(title=f"Fields in {args.formfile}")
    table.add_column("Name", style="cyan")
    table.add_column("Position")
    table.add_column("Width", justify="right")
    table.add_column("Default")
    table.add_column("Flags", style="dim")
    table.add_column("Choices")

    for field in form.fields:
        flags = []
        if field.mask is not None:
            flags.append("masked")
        if field.allowed is not None:
            flags.append("digits" if field.allowed == DIGITS else "restricted")
        if field.has_choices:
            flags.append(field.select.value)
        choices = ", ".join(c.id for c in field.choices)
        table.add_row(
            field.name,
            str(field.position),
            str(field.width),
            field.default_value,
            " ".join(flags),
            choices,
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(form.fields)} fields, {len(form.labels)} labels[/dim]")
    return EXIT_SUBMITTED


def cmd_config(args: argparse.Namespace, config: FormConfig) -> None:
    """Configuration management commands."""
    if args.config_command == "show":
        console.print("[bold]Current Configuration:[/bold]\n")
        console.print(yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False))
    elif args.config_command == "path":
        _config_path(args.config)
    else:
        console.print("[yellow]Usage: termform config <show|path>[/yellow]")


def _config_path(explicit: str | None) -> None:
    """Show config file search paths."""
    console.print("[bold]Config file search paths:[/bold]\n")

    env_value = os.environ.get(CONFIG_ENV_VAR)
    paths = [
        ("--config", Path(explicit) if explicit else None),
        (f"${CONFIG_ENV_VAR}", Path(env_value) if env_value else None),
        ("User config", default_config_path()),
    ]

    for name, path in paths:
        if path is None:
            console.print(f"  [dim]·[/dim] {name}: (not set)")
            continue
        exists = "[green]✓[/green]" if path.exists() else "[dim]·[/dim]"
        console.print(f"  {exists} {name}: {path}")


if __name__ == "__main__":
    main()
