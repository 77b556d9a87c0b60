"""CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
import threading
from typing import Optional, Sequence, Set
from uuid import UUID

from .core import (
    ClientConfig,
    ConfigError,
    ConnectionManager,
    Message,
    MessageKind,
    TransportError,
    load_config,
)

LOGGER = logging.getLogger(__name__)

CLICK_PREFIX = "#"


def cli(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        prog="rasa-session",
        description="Console chat client for a Rasa socket.io channel",
    )
    parser.add_argument("--config-dir", help="Directory holding .env and client.yaml")
    parser.add_argument("--url", dest="server_url", help="Rasa server address, e.g. http://localhost:5005")
    parser.add_argument("--socket-path", help="socket.io path on the server (default /socket.io)")
    parser.add_argument("--send-on-connect", help="Utterance sent once the session is confirmed, e.g. /greet")
    args = parser.parse_args(argv)

    log_level_name = os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(
            args.config_dir,
            server_url=args.server_url,
            socket_path=args.socket_path,
            send_on_connect=args.send_on_connect,
        )
    except ConfigError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 1

    try:
        asyncio.run(_run_async(config))
    except TransportError as exc:
        LOGGER.error("Connection failed: %s", exc)
        return 1
    except KeyboardInterrupt:
        LOGGER.info("Interrupted by user")
        return 130
    return 0


class ConsolePrinter:
    """Prints agent messages as they are appended to the history."""

    def __init__(self, stream=None) -> None:
        self._stream = stream or sys.stdout
        self._seen: Set[UUID] = set()

    def __call__(self, manager: ConnectionManager) -> None:
        for message in manager.history:
            if message.id in self._seen:
                continue
            self._seen.add(message.id)
            if message.received:
                self._stream.write(format_message(message) + "\n")
        self._stream.flush()


def format_message(message: Message) -> str:
    if message.kind is MessageKind.ATTACHMENT and message.attachment:
        head = f"bot> [{message.attachment.type}] {message.attachment.src or ''}".rstrip()
        return "\n".join([head, *_option_lines(message)])
    if message.kind is MessageKind.QUICK_REPLY:
        lines = [f"bot> {message.text}"] if message.text else []
        return "\n".join(lines + _option_lines(message))
    if message.kind is MessageKind.TEXT:
        return f"bot> {message.text}"
    return f"bot> (unsupported) {json.dumps(message.raw, default=str)}"


def _option_lines(message: Message) -> list[str]:
    return [
        f"  {CLICK_PREFIX}{index} {option.title}"
        for index, option in enumerate(message.quick_replies, start=1)
    ]


def latest_open_quick_reply(history: Sequence[Message]) -> Optional[Message]:
    for message in reversed(history):
        if message.quick_replies and not message.clicked:
            return message
    return None


async def _click(manager: ConnectionManager, choice: str) -> None:
    message = latest_open_quick_reply(manager.history)
    if message is None:
        print("No quick reply to choose from")
        return
    try:
        index = int(choice) - 1
    except ValueError:
        print(f"Not an option number: {choice}")
        return
    if not 0 <= index < len(message.quick_replies):
        print(f"Choose between 1 and {len(message.quick_replies)}")
        return
    action = message.quick_replies[index].action
    if action is not None:
        await manager.click(action)


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, lines: asyncio.Queue) -> None:
    def _read() -> None:
        for line in sys.stdin:
            loop.call_soon_threadsafe(lines.put_nowait, line)
        loop.call_soon_threadsafe(lines.put_nowait, None)

    threading.Thread(target=_read, name="stdin-reader", daemon=True).start()


async def _run_async(config: ClientConfig) -> None:
    lines: asyncio.Queue = asyncio.Queue()
    _start_stdin_reader(asyncio.get_running_loop(), lines)

    async with ConnectionManager(config) as manager:
        manager.add_listener(ConsolePrinter())
        LOGGER.info("Chatting with %s, Ctrl-D to quit", config.server_url)
        while True:
            line = await lines.get()
            if line is None:
                break
            text = line.strip()
            if not text:
                continue
            if text.startswith(CLICK_PREFIX):
                await _click(manager, text[len(CLICK_PREFIX):])
                continue
            await manager.utter(text)
    LOGGER.info("Shutdown complete")


if __name__ == "__main__":
    raise SystemExit(cli())
