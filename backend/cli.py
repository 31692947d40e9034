"""
Command-line front end for logging workouts.

    workout-logger log <template_id>     log a workout interactively
    workout-logger drafts                list templates with a saved draft
    workout-logger discard <template_id> delete a template's draft

Inside `log`, exercises and sets are numbered from 1:

    show                         print the session
    set <ex> <set> <reps> <wt>   change both fields ("-" leaves a field unset)
    reps <ex> <set> <value>      change reps
    weight <ex> <set> <value>    change weight
    submit                       send the workout
    cancel                       abandon the session and delete its draft
    quit                         save the draft and exit
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, TextIO

from application.draft_store import DraftStore
from application.exceptions import SessionError, TransportError
from application.session_engine import EngineConfig, SessionEngine
from backend.settings import Settings, get_settings
from domain.models import CreateWorkoutResponse, Session
from domain.services import form_errors, parse_set_value
from infrastructure.drafts import FileDraftStorage
from infrastructure.scheduling import ThreadTimerScheduler
from infrastructure.workout_api_client import WorkoutAPIClient

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  show                         print the session
  set <ex> <set> <reps> <wt>   change both fields ("-" leaves a field unset)
  reps <ex> <set> <value>      change reps
  weight <ex> <set> <value>    change weight
  submit                       send the workout
  cancel                       abandon the session and delete its draft
  quit                         save the draft and exit"""


class CommandError(ValueError):
    """Raised when a line typed in the log loop can't be parsed."""

    pass


@dataclass(frozen=True)
class Command:
    """
    A parsed log-loop command.

    Indices are zero-based; values are None when left unset.
    """

    name: str
    exercise_index: Optional[int] = None
    set_index: Optional[int] = None
    reps: Optional[float] = None
    weight: Optional[float] = None


_ARITY = {
    "show": 0,
    "help": 0,
    "submit": 0,
    "cancel": 0,
    "quit": 0,
    "set": 4,
    "reps": 3,
    "weight": 3,
}

_ALIASES = {"exit": "quit", "?": "help", "ls": "show"}


def _position(text: str, what: str) -> int:
    try:
        number = int(text)
    except ValueError:
        raise CommandError(f"{what} must be a number, got {text!r}") from None
    if number < 1:
        raise CommandError(f"{what} numbers start at 1")
    return number - 1


def _value(text: str, what: str):
    try:
        return parse_set_value(text)
    except ValueError:
        raise CommandError(f"{what} must be a number or '-', got {text!r}") from None


def parse_command(line: str) -> Command:
    """
    Parse one line of the log loop.

    Examples:
        >>> parse_command("set 1 2 10 60")
        Command(name='set', exercise_index=0, set_index=1, reps=10, weight=60)
        >>> parse_command("weight 2 1 -")
        Command(name='weight', exercise_index=1, set_index=0, reps=None, weight=None)

    Raises:
        CommandError: On unknown commands or bad arguments
    """
    parts = line.split()
    if not parts:
        raise CommandError("Type 'help' for commands")

    name = _ALIASES.get(parts[0].lower(), parts[0].lower())
    args = parts[1:]
    if name not in _ARITY:
        raise CommandError(f"Unknown command {parts[0]!r}; type 'help' for commands")
    if len(args) != _ARITY[name]:
        raise CommandError(f"'{name}' takes {_ARITY[name]} argument(s); type 'help' for usage")

    if _ARITY[name] == 0:
        return Command(name=name)

    exercise_index = _position(args[0], "Exercise")
    set_index = _position(args[1], "Set")
    if name == "set":
        return Command(
            name=name,
            exercise_index=exercise_index,
            set_index=set_index,
            reps=_value(args[2], "Reps"),
            weight=_value(args[3], "Weight"),
        )
    if name == "reps":
        return Command(
            name=name, exercise_index=exercise_index, set_index=set_index, reps=_value(args[2], "Reps")
        )
    return Command(
        name=name, exercise_index=exercise_index, set_index=set_index, weight=_value(args[2], "Weight")
    )


# =============================================================================
# Rendering
# =============================================================================


def _fmt(value) -> str:
    if value is None:
        return "-"
    return f"{value:g}" if isinstance(value, float) else str(value)


def render_session(session: Session, *, resumed: bool = False) -> str:
    """Human-readable view of the session, numbered from 1."""
    title = session.template_name or session.template_id
    lines = [f"{title}{' (resumed draft)' if resumed else ''}"]
    for i, exercise in enumerate(session.exercises, start=1):
        mark = " [done]" if exercise.completed else ""
        lines.append(f" {i}. {exercise.exercise_name or exercise.exercise_id}{mark}")
        for j, entry in enumerate(exercise.sets, start=1):
            row = f"    {j}: {_fmt(entry.reps)} x {_fmt(entry.weight)}"
            if entry.source is not None:
                row += f"  ({entry.source.value})"
            if entry.error:
                row += f"  ! {entry.error}"
            lines.append(row)
    return "\n".join(lines)


def render_personal_bests(result: CreateWorkoutResponse) -> List[str]:
    return [
        f"New personal best: {pb.exercise_name or pb.exercise_id} "
        f"{_fmt(pb.previous_weight)} -> {_fmt(pb.new_weight)}"
        for pb in result.personal_bests_updated
    ]


# =============================================================================
# Subcommands
# =============================================================================


def _draft_store(settings: Settings) -> DraftStore:
    return DraftStore(FileDraftStorage(settings.draft_dir))


def _api_client(settings: Settings) -> WorkoutAPIClient:
    return WorkoutAPIClient(
        settings.workout_api_url,
        timeout=settings.workout_api_timeout,
        auth_token=settings.workout_api_token,
    )


def _apply(engine: SessionEngine, command: Command) -> Optional[str]:
    ei, si = command.exercise_index, command.set_index
    if command.name == "set":
        engine.update_set(ei, si, "reps", command.reps)
        return engine.update_set(ei, si, "weight", command.weight)
    if command.name == "reps":
        return engine.update_set(ei, si, "reps", command.reps)
    return engine.update_set(ei, si, "weight", command.weight)


def _submit(engine: SessionEngine, out: TextIO) -> None:
    if engine.submit_error:
        engine.dismiss_error()
    submitted = asyncio.run(engine.submit())
    if submitted:
        print(f"Workout saved ({engine.submit_result.id}).", file=out)
        for line in render_personal_bests(engine.submit_result):
            print(line, file=out)
        return

    if engine.submit_error:
        print(f"Error: {engine.submit_error}", file=out)
    for ei, set_index, message in form_errors(engine.session):
        print(f"  exercise {ei + 1}, set {set_index + 1}: {message}", file=out)


def run_log(
    template_id: str,
    settings: Settings,
    *,
    input_fn: Callable[[str], str] = input,
    out: TextIO = sys.stdout,
    engine: Optional[SessionEngine] = None,
    client: Optional[WorkoutAPIClient] = None,
) -> int:
    """
    Interactive logging loop for one template.

    Returns:
        Process exit code
    """
    client = client or _api_client(settings)
    try:
        prefill = asyncio.run(client.get_prefill(template_id))
    except TransportError as e:
        print(f"Error: {e.message}", file=out)
        return 1

    if engine is None:
        engine = SessionEngine(
            draft_store=_draft_store(settings),
            transport=client,
            scheduler=ThreadTimerScheduler(),
            config=EngineConfig.from_settings(settings),
        )

    with engine:
        engine.initialize(prefill)
        logger.debug(f"Logging template {template_id} (resumed draft: {engine.resumed_from_draft})")
        print(render_session(engine.session, resumed=engine.resumed_from_draft), file=out)

        while not engine.is_terminal:
            try:
                line = input_fn("> ")
            except (EOFError, KeyboardInterrupt):
                line = "quit"

            try:
                command = parse_command(line)
            except CommandError as e:
                print(e, file=out)
                continue

            if command.name == "quit":
                if engine.flush():
                    print("Draft saved.", file=out)
                break
            if command.name == "help":
                print(HELP_TEXT, file=out)
            elif command.name == "show":
                print(render_session(engine.session), file=out)
            elif command.name == "submit":
                _submit(engine, out)
            elif command.name == "cancel":
                try:
                    engine.cancel()
                except SessionError as e:
                    print(f"Error: {e}", file=out)
                else:
                    print("Session abandoned; draft deleted.", file=out)
            else:
                try:
                    error = _apply(engine, command)
                except IndexError:
                    print("No such exercise or set; type 'show' to see the numbering", file=out)
                except SessionError as e:
                    print(f"Error: {e}", file=out)
                else:
                    print(f"! {error}" if error else "ok", file=out)

    return 0


def run_drafts(settings: Settings, *, out: TextIO = sys.stdout) -> int:
    template_ids = _draft_store(settings).list_template_ids()
    if not template_ids:
        print("No drafts.", file=out)
    for template_id in template_ids:
        print(template_id, file=out)
    return 0


def run_discard(template_id: str, settings: Settings, *, out: TextIO = sys.stdout) -> int:
    store = _draft_store(settings)
    if not store.exists(template_id):
        print(f"No draft for template {template_id}.", file=out)
        return 1
    store.clear(template_id)
    print(f"Draft for template {template_id} deleted.", file=out)
    return 0


# =============================================================================
# Entry point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workout-logger",
        description="Log workouts against a template with local drafts",
    )
    parser.add_argument("--api-url", help="Workouts API base URL (overrides WORKOUT_API_URL)")
    parser.add_argument("--draft-dir", help="Draft directory (overrides DRAFT_DIR)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    log_parser = subparsers.add_parser("log", help="Log a workout interactively")
    log_parser.add_argument("template_id", help="Template to log against")

    subparsers.add_parser("drafts", help="List templates with a saved draft")

    discard_parser = subparsers.add_parser("discard", help="Delete a template's draft")
    discard_parser.add_argument("template_id", help="Template whose draft to delete")

    return parser


def _settings_from_args(args: argparse.Namespace, settings: Settings) -> Settings:
    overrides = {}
    if args.api_url:
        overrides["workout_api_url"] = args.api_url
    if args.draft_dir:
        overrides["draft_dir"] = Path(args.draft_dir)
    return settings.model_copy(update=overrides) if overrides else settings


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = _settings_from_args(args, get_settings())

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        if args.command == "log":
            return run_log(args.template_id, settings)
        if args.command == "drafts":
            return run_drafts(settings)
        return run_discard(args.template_id, settings)
    except SessionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
