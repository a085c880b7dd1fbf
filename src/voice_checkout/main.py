from __future__ import annotations

import sys

import uvicorn

from voice_checkout.adapters.inbound.cli import run_cli
from voice_checkout.bootstrap import build_usecases
from voice_checkout.config import load_settings
from voice_checkout.logging import configure_logging


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    if len(argv) < 2:
        print("usage: voice-checkout-cli <session_id> <tool_name> ['<json>']")
        return 2

    settings = load_settings()
    configure_logging(settings.log_level, json=settings.log_json)
    dispatcher = build_usecases(settings).dispatcher
    raw = argv[2] if len(argv) > 2 else "{}"
    return run_cli(dispatcher, argv[0], argv[1], raw)


def serve() -> None:
    settings = load_settings()
    uvicorn.run("voice_checkout.asgi:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    raise SystemExit(main())
