"""CLI entry point for travel-agent."""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from typing import Any

from travel_agent.app import TravelAgentApp
from travel_agent.config import AppConfig, load_config
from travel_agent.core.state import AppState
from travel_agent.log import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="travel-agent",
        description="Conversational travel assistant for the web and Telegram",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for name, help_text in (
        ("start", "Start the web server and Telegram bot"),
        ("config-check", "Validate configuration"),
        ("tools", "List tools and whether they are available"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("-c", "--config", default="config.yaml", help="Path to config file")
        sub.add_argument("-e", "--env", default=".env", help="Path to .env file")

    args = parser.parse_args()

    if args.command is None:
        # Default to start
        args.command = "start"
        args.config = "config.yaml"
        args.env = ".env"

    match args.command:
        case "config-check":
            _check_config(args.config, args.env)
        case "tools":
            _list_tools(args.config, args.env)
        case "start":
            sys.exit(_run(args.config, args.env))


def _load(config_path: str, env_path: str) -> AppConfig:
    try:
        return load_config(config_path, env_path)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Copy config.example.yaml to config.yaml and fill in your keys", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)


def _check_config(config_path: str, env_path: str) -> None:
    """Validate configuration and print summary."""
    config = _load(config_path, env_path)
    print(f"Configuration valid: {config_path}")
    print(f"  Environment: {config.environment}")
    print(f"  Model: {config.anthropic.model} (max_tokens={config.anthropic.max_tokens})")
    web = f"http://{config.web.host}:{config.web.port}" if config.web.enabled else "disabled"
    print(f"  Web: {web}")
    print(f"  Telegram: {'enabled' if config.telegram.token else 'disabled (no token)'}")
    print(f"  Web search: {'enabled' if config.tools.serpapi_key else 'disabled (no SerpAPI key)'}")
    print(f"  Weather: {'enabled' if config.tools.weather_api_key else 'disabled (no weather key)'}")


def _list_tools(config_path: str, env_path: str) -> None:
    config = _load(config_path, env_path)

    async def _collect() -> dict[str, bool]:
        state = AppState.build(config)
        try:
            return state.tools.availability()
        finally:
            await state.aclose()

    setup_logging("WARNING")
    availability = asyncio.run(_collect())
    print("Tools")
    print("=" * 40)
    for name, available in availability.items():
        print(f"  {name:<22} {'available' if available else 'not configured'}")


def _run(config_path: str, env_path: str) -> int:
    """Load config and run until a signal or a fatal error. Returns the exit status."""
    config = _load(config_path, env_path)
    setup_logging(config.log_level)

    async def _async_main() -> int:
        loop = asyncio.get_running_loop()
        stop_event = asyncio.Event()
        fatal: list[dict[str, Any]] = []

        def _signal_handler() -> None:
            stop_event.set()

        def _exception_handler(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
            error = context.get("exception")
            logger.error("unhandled_exception", message=context.get("message"), error=str(error) if error else None)
            fatal.append(context)
            stop_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, _signal_handler)
            except NotImplementedError:
                # Windows doesn't support add_signal_handler
                signal.signal(sig, lambda s, f: _signal_handler())
        loop.set_exception_handler(_exception_handler)

        app = TravelAgentApp(config)
        await app.start()

        waiters = [asyncio.create_task(stop_event.wait())]
        if app.server_task is not None:
            waiters.append(app.server_task)
        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        waiters[0].cancel()

        server_task = app.server_task
        if server_task is not None and server_task.done() and not server_task.cancelled():
            error = server_task.exception()
            if error is not None:
                logger.error("web_server_failed", error=str(error))
                fatal.append({"exception": error})

        await app.stop()
        return 1 if fatal else 0

    return asyncio.run(_async_main())


if __name__ == "__main__":
    main()
