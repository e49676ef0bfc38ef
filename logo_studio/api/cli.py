"""
Interactive terminal studio for Logo Studio.

Architectural role:
- Exposes the two generation modes in a terminal session.
- Keeps per-mode working state through `logo_studio.core.engine.LogoStudio`.
- Delegates generation to the relay over HTTP (`logo_studio.image.client`).

Interface responsibilities:
- Switch modes without losing the other mode's images, brief or result.
- Attach reference images from disk, edit the brief, trigger generation.
- Show session history and save the current result to disk.

Request lifecycle (per generation, CLI):
1. `/generate` (or a plain text line, which becomes the brief first).
2. Controller validates locally; invalid input is reported without a network call.
3. Relay call runs off the event loop; the outcome sets SUCCESS or ERROR.
4. The result summary or the error message is printed.

Local commands:
- `/mode [modernize|create]`, `/image <path>...`, `/images [clear]`,
  `/prompt <text>`, `/generate`, `/history`, `/save [dir]`, `/status`, `/help`.
- `exit` / `quit` leave the session (history is in-memory only).

Error handling strategy:
- Generation failures are shown as the session error; the loop continues.
- EOF and keyboard interrupts end the loop without traceback output.
"""

import argparse
import asyncio
import logging
import shlex
import sys
from datetime import datetime
from typing import Callable, Optional

from logo_studio.core.engine import LogoStudio
from logo_studio.core.errors import StudioError
from logo_studio.core.types import MAX_REFERENCE_IMAGES, Mode, Status
from logo_studio.image.client import RelayClient
from logo_studio.image.download import extension_for
from logo_studio.llm.provider_config import relay_url


HELP_TEXT = (
    "Commands:\n"
    " /mode [modernize|create]   show or switch the active mode\n"
    " /image <path> [<path>...]  attach reference images (max 5)\n"
    " /images [clear]            list or clear attached images\n"
    " /prompt <text>             set the creative brief\n"
    " /generate                  generate a logo for the active mode\n"
    " /history                   list recent creations\n"
    " /save [directory]          save the current result\n"
    " /status                    show the active mode's state\n"
    " exit | quit                leave the studio\n"
    "Any other text becomes the brief and starts a generation."
)

MODE_TITLES = {
    Mode.MODERNIZE: "Brand Revival (modernize an existing logo)",
    Mode.CREATE: "Forge Identity (create a new logo)",
}


# =========================================================
# COMMAND DISPATCH
# =========================================================

def run_command(studio: LogoStudio, line: str, out: Callable[[str], None] = print) -> bool:
    """Apply one line of user input to `studio`.

    Returns:
        False when the session should end, True otherwise.
    """
    text = line.strip()
    if not text:
        return True

    lowered = text.lower()

    if lowered in ("exit", "quit"):
        out("Closing studio. Session history discarded.")
        return False

    if not text.startswith("/"):
        studio.set_prompt(text)
        _generate(studio, out)
        return True

    command, _, argument = text.partition(" ")
    command = command.lower()
    argument = argument.strip()

    if command == "/help":
        out(HELP_TEXT)

    elif command == "/mode":
        if not argument:
            out(f"Active mode: {MODE_TITLES[studio.mode]}")
        else:
            try:
                studio.switch_mode(Mode(argument.lower()))
            except ValueError:
                out(f"Unknown mode '{argument}'. Use 'modernize' or 'create'.")
            else:
                out(f"Switched to {MODE_TITLES[studio.mode]}")
                _print_status(studio, out)

    elif command == "/image":
        try:
            paths = shlex.split(argument)
        except ValueError:
            paths = argument.split()
        if not paths:
            out("Usage: /image <path> [<path>...]")
        else:
            added = studio.add_image_files(paths)
            out(
                f"Attached {added} image(s); {len(studio.active.images)}/"
                f"{MAX_REFERENCE_IMAGES} in use."
            )
            if added < len(paths):
                out("Some files were skipped (unreadable, not an image, or over the limit).")

    elif command == "/images":
        if argument.lower() == "clear":
            studio.clear_images()
            out("Reference images cleared.")
        else:
            out(f"{len(studio.active.images)} reference image(s) attached.")

    elif command == "/prompt":
        studio.set_prompt(argument)
        out("Brief updated." if argument else "Brief cleared.")

    elif command == "/generate":
        _generate(studio, out)

    elif command == "/history":
        _print_history(studio, out)

    elif command == "/save":
        try:
            path = studio.download(argument or ".")
        except StudioError as e:
            out(e.message)
        except (OSError, ValueError) as e:
            out(f"Could not save the logo: {e}")
        else:
            out(f"Saved {path}")

    elif command == "/status":
        _print_status(studio, out)

    else:
        out(f"Unknown command '{command}'. Type /help for the list of commands.")

    return True


def _generate(studio: LogoStudio, out: Callable[[str], None]) -> None:
    out("AI designer at work...")
    result = asyncio.run(studio.generate())

    if result is None:
        out(f"Error: {studio.active.error}" if studio.active.error else "Generation skipped.")
        return

    out(
        f"Logo ready ({extension_for(result.image_data).upper()}). "
        "Use /save to download it."
    )


def _print_status(studio: LogoStudio, out: Callable[[str], None]) -> None:
    session = studio.active
    out(f"Mode: {studio.mode.value} | Status: {session.status.value}")
    out(f"Images: {len(session.images)} | Brief: {session.prompt or '(empty)'}")
    if session.result is not None:
        out(f"Result: {extension_for(session.result.image_data)} image ready")
    if session.status is Status.ERROR and session.error:
        out(f"Error: {session.error}")


def _print_history(studio: LogoStudio, out: Callable[[str], None]) -> None:
    if not len(studio.history):
        out("No creations yet.")
        return

    out("Recent creations:")
    for index, entry in enumerate(studio.history, start=1):
        created = datetime.fromtimestamp(entry.result.created_at).strftime("%H:%M:%S")
        out(f" {index:>2}. [{entry.result.source_mode.value}] {entry.label} ({created})")


# =========================================================
# MAIN
# =========================================================

def main(argv: Optional[list] = None) -> int:
    """Run the interactive studio loop against a running relay."""
    parser = argparse.ArgumentParser(description="Logo Studio interactive client")
    parser.add_argument("--relay-url", default=None, help="Relay base URL (default: $RELAY_URL)")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in Mode],
        default=Mode.MODERNIZE.value,
        help="Initial mode",
    )
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    studio = LogoStudio(RelayClient(args.relay_url or relay_url()), mode=Mode(args.mode))

    print("Logo Studio started. (Type /help for commands, 'exit' to quit)")
    print(f"Active mode: {MODE_TITLES[studio.mode]}")
    print("-" * 60)

    while True:
        try:
            line = input(f"[{studio.mode.value}] > ")
        except EOFError:
            print("\nSession closed.")
            break
        except KeyboardInterrupt:
            print("\nOperation cancelled by user.")
            break

        if not run_command(studio, line):
            break

    return 0


if __name__ == "__main__":
    sys.exit(main())
