"""Retouch CLI entrypoints."""

from __future__ import annotations

import argparse
import asyncio
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .cli_progress import ProgressTicker
from .config import SUPPORTED_LOCALES, SUPPORTED_PROVIDERS, StudioConfig, normalize_locale
from .controller import TransformController
from .datauri import ImageFile
from .download import DEFAULT_DOWNLOAD_NAME
from .errors import RetouchError
from .messages import describe_error
from .providers import build_client
from .runs.events import EventWriter
from .utils import format_bytes, load_dotenv


@dataclass(frozen=True)
class StudioCommand:
    command: str
    action: str
    usage: str


STUDIO_COMMANDS: tuple[StudioCommand, ...] = (
    StudioCommand("open", "select_image", "/open PATH      choose the image to edit"),
    StudioCommand("prompt", "edit_prompt", "/prompt TEXT    describe the edit (bare text works too)"),
    StudioCommand("go", "submit_transform", "/go             send the image and prompt to the model"),
    StudioCommand("save", "download", "/save [DIR]     save the result as transformed-image.png"),
    StudioCommand("dismiss", "dismiss_error", "/dismiss        clear the current error"),
    StudioCommand("reset", "reset", "/reset          start over with an empty session"),
    StudioCommand("status", "status", "/status         show the session state"),
    StudioCommand("help", "help", "/help           list commands"),
    StudioCommand("quit", "quit", "/quit           leave the studio"),
)
_COMMAND_MAP = {spec.command: spec.action for spec in STUDIO_COMMANDS}
_COMMAND_MAP["exit"] = "quit"


def parse_command(line: str) -> tuple[str, str]:
    """Map one line of studio input to ``(action, argument)``."""
    text = line.strip()
    if not text:
        return "noop", ""
    if not text.startswith("/"):
        return "edit_prompt", text
    head, _, rest = text[1:].partition(" ")
    action = _COMMAND_MAP.get(head.strip().lower())
    if action is None:
        return "unknown", head
    return action, rest.strip()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retouch", description="Edit an image with a natural-language instruction")
    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser("run", help="Transform one image and save the result")
    run.add_argument("--image", required=True, help="Path to the source image")
    run.add_argument("--prompt", required=True, help="Edit instruction")
    run.add_argument("--out", required=True, help="Output directory")
    run.add_argument("--events", help="Path to events.jsonl")
    _add_client_args(run)

    studio = sub.add_parser("studio", help="Interactive editing session")
    studio.add_argument("--out", required=True, help="Output directory")
    studio.add_argument("--events", help="Path to events.jsonl")
    _add_client_args(studio)

    return parser


def _add_client_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--provider", choices=SUPPORTED_PROVIDERS)
    parser.add_argument("--model")
    parser.add_argument("--locale", choices=SUPPORTED_LOCALES)


def _resolve_config(args: argparse.Namespace) -> StudioConfig:
    config = StudioConfig.from_env()
    if args.provider:
        config.provider = args.provider
    if args.model:
        config.model = args.model
    if args.locale:
        config.locale = normalize_locale(args.locale)
    if not os.getenv("RETOUCH_DOWNLOAD_DIR"):
        config.download_dir = Path(args.out)
    return config


def _build_controller(args: argparse.Namespace, config: StudioConfig) -> TransformController:
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    events_path = Path(args.events) if args.events else out_dir / "events.jsonl"
    events = EventWriter(events_path, str(uuid.uuid4()))
    try:
        client = build_client(config)
    except RetouchError as exc:
        events.emit("session_failed", kind=exc.kind.value)
        raise
    return TransformController(client, config=config, events=events)


def _select(controller: TransformController, runner: asyncio.Runner, raw_path: str) -> bool:
    try:
        image_file = ImageFile.from_path(raw_path)
    except RetouchError as exc:
        controller.session.error = describe_error(exc, controller.locale)
        return False
    return runner.run(controller.select_image(image_file))


def _transform(controller: TransformController, runner: asyncio.Runner) -> bool:
    ticker = ProgressTicker("Transforming image", done_label="Transformed in")
    ticker.start_ticking()
    ok = False
    try:
        ok = runner.run(controller.submit_transform())
    finally:
        ticker.stop(done=ok)
    return ok


def _handle_run(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    try:
        controller = _build_controller(args, config)
    except RetouchError as exc:
        print(describe_error(exc, config.locale))
        return 1
    with asyncio.Runner() as runner:
        if not _select(controller, runner, args.image):
            print(controller.session.error)
            return 1
        controller.edit_prompt(args.prompt)
        if not _transform(controller, runner):
            print(f"Transform failed: {controller.session.error}")
            return 1
    controller.download_result(args.out)
    print(f"Saved {DEFAULT_DOWNLOAD_NAME} to {args.out}")
    return 0


def _handle_studio(args: argparse.Namespace, read_line: Callable[[str], str] = input) -> int:
    config = _resolve_config(args)
    try:
        controller = _build_controller(args, config)
    except RetouchError as exc:
        print(describe_error(exc, config.locale))
        return 1
    print("Retouch studio. Type /help for commands.")
    with asyncio.Runner() as runner:
        while True:
            try:
                line = read_line("> ")
            except (EOFError, KeyboardInterrupt):
                print()
                break
            action, arg = parse_command(line)
            if action == "quit":
                break
            previous_error = controller.session.error
            _run_studio_action(controller, runner, action, arg)
            if controller.session.error and controller.session.error != previous_error:
                print(f"! {controller.session.error}")
    return 0


def _run_studio_action(
    controller: TransformController,
    runner: asyncio.Runner,
    action: str,
    arg: str,
) -> None:
    if action == "noop":
        return
    if action == "help":
        for spec in STUDIO_COMMANDS:
            print(spec.usage)
        return
    if action == "unknown":
        print(f"Unknown command: /{arg}")
        return
    if action == "select_image":
        if not arg:
            print("Usage: /open PATH")
            return
        if _select(controller, runner, arg):
            print(f"Image loaded: {arg}")
        return
    if action == "edit_prompt":
        controller.edit_prompt(arg)
        return
    if action == "submit_transform":
        if _transform(controller, runner):
            print("Result ready. Use /save to keep it.")
        return
    if action == "download":
        target = arg or controller.config.download_dir
        try:
            saved = controller.download_result(target)
        except RetouchError as exc:
            print(f"Could not save: {describe_error(exc, controller.locale)}")
            return
        except OSError as exc:
            print(f"Could not save to {target}: {exc}")
            return
        print(f"Saved to {target}" if saved else "Nothing to save yet.")
        return
    if action == "dismiss_error":
        controller.dismiss_error()
        return
    if action == "reset":
        controller.reset()
        print("Session reset.")
        return
    if action == "status":
        _print_status(controller)


def _print_status(controller: TransformController) -> None:
    snapshot = controller.session.snapshot()
    original = format_bytes(snapshot["original_chars"]) if snapshot["has_original"] else "none"
    result = format_bytes(snapshot["transformed_chars"]) if snapshot["has_transformed"] else "none"
    print(f"Image: {original} | Result: {result} | Busy: {snapshot['is_busy']}")
    print(f"Prompt: {controller.session.prompt or '(empty)'}")
    if snapshot["error"]:
        print(f"Error: {snapshot['error']}")


def main() -> None:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args()
    if args.command == "run":
        raise SystemExit(_handle_run(args))
    if args.command == "studio":
        raise SystemExit(_handle_studio(args))
    parser.print_help()
    raise SystemExit(1)


if __name__ == "__main__":
    main()
