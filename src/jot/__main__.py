"""Jot entry point.

Usage:
    python -m jot [OPTIONS]

Options:
    --config PATH    Path to YAML config file
    --profile NAME   Profile name (default, dev, test)
    --capture PATH   Create notes from an audio file
    --ask PATH       Run a voice command from an audio file
    --list           Print the main feed
    --serve          Run the HTTP service
    --remote URL     Use a remote Jot service instead of the local engine
    --version        Show version
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml
from dotenv import load_dotenv

from . import __version__
from .audio.capture import FileAudioCapture
from .config import JotConfig
from .config.loader import load_config
from .engine import JotEngine
from .errors import JotError, user_message
from .notes.views import notes_by_category
from .timefmt import format_due_local

# Try to find .env in project root (parent of src/), else the current directory
_env_file = Path(__file__).parent.parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="jot",
        description="Jot - voice notes and voice commands",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m jot --capture memo.m4a          # Turn a recording into notes
  python -m jot --ask question.m4a          # Ask about or act on notes
  python -m jot --list                      # Show the main feed
  python -m jot --serve --profile dev       # Run the HTTP service
  python -m jot --remote http://host:5000 --capture memo.m4a

Environment:
  ANTHROPIC_API_KEY   Key for note understanding
  OPENAI_API_KEY      Key for hosted transcription
""",
    )

    parser.add_argument("--config", type=Path, help="Path to YAML config file", metavar="PATH")
    parser.add_argument(
        "--profile",
        choices=["default", "dev", "test"],
        help="Configuration profile to use",
    )
    parser.add_argument("--version", action="version", version=f"Jot v{__version__}")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and exit (for testing)",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use mock transcriber and language model",
    )

    action = parser.add_mutually_exclusive_group()
    action.add_argument("--capture", type=Path, metavar="PATH", help="Create notes from an audio file")
    action.add_argument("--ask", type=Path, metavar="PATH", help="Run a voice command from an audio file")
    action.add_argument("--list", action="store_true", help="Print the main feed")
    action.add_argument("--serve", action="store_true", help="Run the HTTP service")

    parser.add_argument("--remote", metavar="URL", help="Use the Jot service at URL")

    return parser.parse_args(argv)


def print_feed(engine: JotEngine) -> None:
    """Print active notes grouped by category."""
    timezone = engine.settings.settings.timezone
    groups = notes_by_category(engine.notes.notes)
    if not any(groups.values()):
        print("No notes yet.")
        return

    for category, notes in groups.items():
        if not notes:
            continue
        print(f"\n{category.value.upper()}")
        for note in notes:
            mark = "x" if note.completed else " "
            line = f"  [{mark}] {note.title}"
            if note.due_date is not None:
                line += f" (due {format_due_local(note.due_date, timezone)})"
            if note.tags:
                line += f" #{' #'.join(note.tags)}"
            print(line)


def run_capture(engine: JotEngine, path: Path) -> int:
    clip = engine.pipeline.record(FileAudioCapture(path))
    notes = engine.pipeline.capture_notes(clip)
    if not notes:
        print("Nothing to note.")
    for note in notes:
        print(f"+ [{note.category.value}] {note.title}")
    return 0


def run_ask(engine: JotEngine, path: Path) -> int:
    clip = engine.pipeline.record(FileAudioCapture(path))
    result = engine.pipeline.ask(clip)
    print(result.response)
    outcome = engine.pipeline.last_outcome
    if outcome is not None and outcome.created_section is not None:
        print(f"Created section: {outcome.created_section.name}")
    elif outcome is not None and outcome.affected_note_ids and result.action is not None:
        print(f"{result.action.value}: {len(outcome.affected_note_ids)} notes")
    return 0


def run_server(config: JotConfig, use_mocks: bool) -> int:
    import uvicorn

    from .backend import create_local_backend
    from .server import create_app

    app = create_app(
        create_local_backend(config, use_mocks=use_mocks),
        default_timezone=config.server.default_timezone,
    )
    uvicorn.run(app, host=config.server.host, port=config.server.port)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for Jot.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_args(argv)

    try:
        if args.config:
            config = load_config(path=args.config)
        else:
            config = load_config(profile=args.profile)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1
    except (OSError, TypeError, yaml.YAMLError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.level)
    logger = logging.getLogger("jot")
    logger.info(f"Jot v{__version__}")

    if args.dry_run:
        logger.info("Dry run mode - exiting after config load")
        logger.info(f"STT: {config.stt.provider}:{config.stt.model}")
        logger.info(f"LLM: {config.llm.provider}:{config.llm.model}")
        logger.info(f"Storage: {config.storage.backend}")
        return 0

    try:
        if args.serve:
            return run_server(config, args.mock)

        backend = None
        if args.remote:
            from .api import NotesAPIClient

            backend = NotesAPIClient(args.remote, timeout=config.llm.timeout_seconds)

        engine = JotEngine.from_config(config, use_mocks=args.mock, backend=backend)

        for notification in engine.notifications.check_due():
            print(f"Reminder: {notification.title} - {notification.body}")

        if args.capture:
            return run_capture(engine, args.capture)
        if args.ask:
            return run_ask(engine, args.ask)

        print_feed(engine)
        return 0
    except (JotError, OSError, ValueError) as e:
        logger.error(f"Command failed: {e}")
        print(f"Error: {user_message(e) if isinstance(e, JotError) else e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
