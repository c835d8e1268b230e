#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — Dev Console
-----------------------------------
Interactive console for talking to the assistant service through the same
ExchangeController a GUI would use.

Features:
- Restores the saved transcript on start and prints it.
- Simple REPL: you type, the assistant answers.
- /clear asks for confirmation, then clears the session remotely + locally.
- /prompts lists the quick prompts, /use N sends one of them.
- Shows the advisory error banner after a failed exchange.

No reconnect or retry logic: a failed query just shows up in the transcript.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from chat_client.core.config import settings
from chat_client.core.controller import ExchangeController
from chat_client.main import create_controller
from chat_client.models import Message
from chat_client.runtime_state import JsonFileStorage, MemoryStorage
from chat_client.utils import setup_logging

HELP_TEXT = (
    "Commands: /clear  /prompts  /use N  /history  /help  /quit\n"
    "Anything else is sent to the assistant."
)


# ---------------------------------------------------------------------------
# CLI argument parsing
# ---------------------------------------------------------------------------


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Assistant Chat Client — Dev Console",
    )
    parser.add_argument(
        "--server",
        type=str,
        default=settings.api_base_url,
        help=f"Assistant service base URL (default: {settings.api_base_url})",
    )
    parser.add_argument(
        "--state",
        type=Path,
        default=settings.state_path,
        help=f"Session state file (default: {settings.state_path})",
    )
    parser.add_argument(
        "--no-persist",
        action="store_true",
        help="Keep the session in memory only.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level for the console (default: WARNING).",
    )
    return parser.parse_args()


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def format_message(message: Message) -> str:
    who = "You" if message.is_user else "Assistant"
    return f"{who}: {message.text}"


def print_header(controller: ExchangeController) -> None:
    print("=" * 60)
    print(settings.app_name)
    print(f"Session: {controller.thread_id[:8]}...")
    print("Capabilities: " + ", ".join(settings.capability_tags))
    print("=" * 60)
    print(HELP_TEXT)
    print()


def print_transcript(controller: ExchangeController) -> None:
    for message in controller.messages:
        print(format_message(message))
    print()


def print_prompts() -> None:
    print("Try a quick command:")
    for idx, prompt in enumerate(settings.quick_prompts, start=1):
        print(f"  {idx}. {prompt}")
    print()


# ---------------------------------------------------------------------------
# REPL
# ---------------------------------------------------------------------------


async def confirm(question: str) -> bool:
    answer = await asyncio.to_thread(input, f"{question} (y/n): ")
    return answer.strip().lower() in {"y", "yes"}


async def send(controller: ExchangeController, text: Optional[str]) -> None:
    before = len(controller.messages)
    sent = await controller.submit(text)
    if not sent:
        return
    # Everything after the user's own line is new assistant output.
    for message in controller.messages[before + 1:]:
        print(format_message(message))
    if controller.error_banner:
        print(f"[!] {controller.error_banner}")
    print()


async def repl(controller: ExchangeController) -> None:
    print_header(controller)
    print_transcript(controller)

    while True:
        try:
            line = await asyncio.to_thread(input, "You: ")
        except (EOFError, KeyboardInterrupt):
            print("\nBye.")
            return

        command = line.strip()
        lowered = command.lower()

        if lowered in {"/quit", "/exit"}:
            print("Bye.")
            return
        if lowered == "/help":
            print(HELP_TEXT + "\n")
            continue
        if lowered == "/history":
            print_transcript(controller)
            continue
        if lowered == "/prompts":
            print_prompts()
            continue
        if lowered.startswith("/use"):
            parts = command.split()
            try:
                prompt = settings.quick_prompts[int(parts[1]) - 1]
            except (IndexError, ValueError):
                print(f"Usage: /use 1..{len(settings.quick_prompts)}\n")
                continue
            controller.set_input(prompt)
            print(f"You: {prompt}")
            await send(controller, None)
            continue
        if lowered == "/clear":
            if not await confirm("Clear chat history"):
                continue
            if await controller.clear():
                print(f"Chat cleared. New session: {controller.thread_id[:8]}...\n")
                print_transcript(controller)
            else:
                print("Could not clear the chat; history kept.\n")
            continue

        await send(controller, line)


def main() -> None:
    args = parse_args()
    setup_logging(level=getattr(logging, args.log_level))

    config = settings.model_copy(update={"api_base_url": args.server, "state_path": args.state})
    storage = MemoryStorage() if args.no_persist else JsonFileStorage(config.state_path)
    controller = create_controller(config, storage=storage)

    try:
        asyncio.run(repl(controller))
    except KeyboardInterrupt:
        print("\nBye.")
        sys.exit(0)


if __name__ == "__main__":
    main()
