"""CLI entry point for appearance-theme.

Each subcommand is a thin wrapper over one ChangeDispatcher operation.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

import appearance_theme.io.logging_setup
import appearance_theme.io.settings
from appearance_theme.app.candidates import Candidates
from appearance_theme.app.collaborators import DispatchResult, DispatchStatus, NullApplier
from appearance_theme.app.dispatcher import ChangeDispatcher
from appearance_theme.app.preference_store import PreferenceStore
from appearance_theme.app.selection_engine import SelectionEngine
from appearance_theme.app.shell_applier import ShellCommandApplier
from appearance_theme.core.errors import UnknownMode
from appearance_theme.core.modes import Mode
from appearance_theme.io.appearance import detect_mode
from appearance_theme.io.blob_store import FileBlobStore
from appearance_theme.tui.prompts import RichConfirm, RichThemePrompt, always_yes

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_WARNING = 1
EXIT_USAGE = 2


class LiveMode:
    """Current-mode provider for the command line.

    Starts from --mode or system detection; notify/watch update it, since the
    notified mode is the live one from then on.
    """

    def __init__(self, forced: Optional[Mode] = None) -> None:
        self._mode = forced

    def __call__(self) -> Mode:
        if self._mode is None:
            self._mode = detect_mode()
        return self._mode

    def set(self, mode: Mode) -> None:
        self._mode = mode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appearance-theme",
        description="Pick and re-apply themes as the system switches between light and dark",
    )
    parser.add_argument(
        "--mode",
        type=str,
        default=None,
        help="Treat this as the live system mode (light/dark) instead of detecting it",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("choose", aliases=["choose-theme"], help="Pick a theme for a mode")
    p.add_argument("target", nargs="?", default=None, help="light or dark (default: live mode)")

    p = sub.add_parser("reset", aliases=["reset-preferences"], help="Forget all saved choices")
    p.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    sub.add_parser("show", aliases=["show-preferences"], help="Show candidates and recent choices")
    sub.add_parser("apply-current", help="Re-apply the saved theme for the live mode")

    p = sub.add_parser("add", aliases=["add-theme"], help="Add a candidate theme")
    p.add_argument("target", help="light or dark")
    p.add_argument("theme", help="Theme name")

    p = sub.add_parser("cycle", aliases=["cycle-theme"], help="Switch to another recent theme")
    p.add_argument("--backward", "-b", action="store_true", help="Pick the oldest recent theme")

    p = sub.add_parser("list-recent", help="List recent themes for a mode")
    p.add_argument("target", nargs="?", default=None, help="light or dark (default: live mode)")

    sub.add_parser("enable", help="Turn automatic switching on and apply now")
    sub.add_parser("disable", help="Turn automatic switching off")

    p = sub.add_parser("notify", help="Report an appearance change (light/dark)")
    p.add_argument("target", help="light or dark")

    sub.add_parser("watch", help="Read appearance changes from stdin, one mode per line")
    return parser


def build_dispatcher(
    settings: dict, live_mode: LiveMode, console: Console, stdin=None
) -> ChangeDispatcher:
    """Wire store, candidates, engine and collaborators from settings."""
    candidates = Candidates.from_dict(
        settings.get("candidates"),
        on_change=lambda c: appearance_theme.io.settings.safe_save_setting("candidates", c.to_dict()),
    )
    state_path = appearance_theme.io.settings.get_state_path(settings)
    store = PreferenceStore(FileBlobStore(state_path))
    engine = SelectionEngine(store, candidates, RichThemePrompt(console, stream=stdin))

    command = settings.get("apply_command")
    if command:
        applier = ShellCommandApplier(str(command), mode_provider=live_mode)
    else:
        logger.info("No apply_command configured; choices are recorded only")
        applier = NullApplier()
    return ChangeDispatcher(
        engine,
        applier,
        live_mode,
        enabled=bool(settings.get("enabled", True)),
    )


def _report(console: Console, result: DispatchResult) -> int:
    if result.message:
        style = "yellow" if result.is_warning else None
        console.print(result.message, style=style, markup=False, highlight=False)
    return EXIT_WARNING if result.is_warning else EXIT_OK


def _print_preferences(console: Console, snapshot: dict) -> None:
    state = "enabled" if snapshot["enabled"] else "disabled"
    console.print(f"Automatic switching: {state}")
    table = Table(show_header=True, header_style="bold")
    table.add_column("Mode")
    table.add_column("Candidates")
    table.add_column("Recent (newest first)")
    for mode_name, entry in snapshot["modes"].items():
        table.add_row(
            mode_name,
            escape(", ".join(entry["candidates"])) or "-",
            escape(", ".join(entry["recent"])) or "-",
        )
    console.print(table)


def run(args: argparse.Namespace, console: Console, stdin=None) -> int:
    settings = appearance_theme.io.settings.load_effective_settings()
    live_mode = LiveMode(Mode.parse(args.mode) if args.mode else None)
    dispatcher = build_dispatcher(settings, live_mode, console, stdin)
    command = args.command

    if command in ("choose", "choose-theme"):
        return _report(console, dispatcher.choose_explicit(args.target))

    if command in ("reset", "reset-preferences"):
        confirm = always_yes if args.yes else RichConfirm(console, stream=stdin)
        return _report(console, dispatcher.reset(confirm))

    if command in ("show", "show-preferences"):
        _print_preferences(console, dispatcher.show_preferences())
        return EXIT_OK

    if command == "apply-current":
        return _report(console, dispatcher.apply_current())

    if command in ("add", "add-theme"):
        return _report(console, dispatcher.add_candidate(args.target, args.theme))

    if command in ("cycle", "cycle-theme"):
        return _report(console, dispatcher.cycle_recent(-1 if args.backward else 1))

    if command == "list-recent":
        for item in dispatcher.list_recent(args.target):
            console.print(item, markup=False, highlight=False)
        return EXIT_OK

    if command == "enable":
        appearance_theme.io.settings.safe_save_setting("enabled", True)
        return _report(console, dispatcher.enable())

    if command == "disable":
        appearance_theme.io.settings.safe_save_setting("enabled", False)
        return _report(console, dispatcher.disable())

    if command == "notify":
        mode = Mode.parse(args.target)
        live_mode.set(mode)
        result = dispatcher.on_mode_changed(mode)
        if result.status is DispatchStatus.DISABLED:
            console.print("Automatic switching is disabled", style="dim")
        return _report(console, result)

    if command == "watch":
        return _watch(dispatcher, live_mode, console, stdin or sys.stdin)

    raise AssertionError(f"unhandled command {command!r}")


def _watch(dispatcher: ChangeDispatcher, live_mode: LiveMode, console: Console, stream) -> int:
    """Feed each line of stream to on_mode_changed. Bad lines are logged and skipped."""
    for line in stream:
        value = line.strip()
        if not value:
            continue
        try:
            mode = Mode.parse(value)
        except UnknownMode as e:
            logger.warning("Ignoring watch input: %s", e)
            continue
        live_mode.set(mode)
        result = dispatcher.on_mode_changed(mode)
        if result.status is not DispatchStatus.DEBOUNCED:
            _report(console, result)
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    appearance_theme.io.logging_setup.configure()
    console = Console()
    try:
        return run(args, console)
    except UnknownMode as e:
        console.print(f"error: {e}", style="red", markup=False, highlight=False)
        return EXIT_USAGE
    except KeyboardInterrupt:
        return EXIT_WARNING


if __name__ == "__main__":
    sys.exit(main())
