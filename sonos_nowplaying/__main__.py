"""Run Sonos Now Playing from the command line."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import threading
from contextlib import suppress
from logging.handlers import RotatingFileHandler
from typing import Final

from aiorun import run
from colorlog import ColoredFormatter

from sonos_nowplaying.common.helpers.json import json_dumps
from sonos_nowplaying.common.models.api import ErrorResultMessage
from sonos_nowplaying.constants import LOG_FILE, ROOT_LOGGER_NAME, VERBOSE_LOG_LEVEL
from sonos_nowplaying.server import SonosNowPlaying

FORMAT_DATE: Final = "%Y-%m-%d"
FORMAT_TIME: Final = "%H:%M:%S"
FORMAT_DATETIME: Final = f"{FORMAT_DATE} {FORMAT_TIME}"
MAX_LOG_FILESIZE = 1000000 * 10  # 10 MB

# cli command => api command
CLI_COMMANDS: Final[dict[str, str]] = {
    "groups": "groups",
    "devices": "devices",
    "discover": "devices/refresh",
}

LOGGER = logging.getLogger(ROOT_LOGGER_NAME)


def get_arguments():
    """Arguments handling."""
    parser = argparse.ArgumentParser(description="Sonos Now Playing")

    default_data_dir = os.getenv("APPDATA") if os.name == "nt" else os.path.expanduser("~")
    default_data_dir = os.path.join(default_data_dir, ".sonos_nowplaying")

    parser.add_argument(
        "command",
        nargs="?",
        choices=list(CLI_COMMANDS),
        default="groups",
        help="What to print (default=groups)",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="path_to_config_dir",
        default=default_data_dir,
        help="Directory that contains the configuration, log and artwork cache",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.environ.get("LOG_LEVEL", "info"),
        help="Provide logging level. Example --log-level debug, "
        "default=info, possible=(critical, error, warning, info, debug, verbose)",
    )
    parser.add_argument(
        "--watch",
        metavar="seconds",
        type=float,
        default=None,
        help="Keep running and print the result every given number of seconds",
    )
    return parser.parse_args()


def setup_logger(data_path: str, level: str = "DEBUG"):
    """Initialize logger."""
    # define log formatter
    log_fmt = "%(asctime)s.%(msecs)03d %(levelname)s (%(threadName)s) [%(name)s] %(message)s"

    # base logging config for the root logger, stdout is reserved for the output
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)

    colorfmt = f"%(log_color)s{log_fmt}%(reset)s"
    logging.getLogger().handlers[0].setFormatter(
        ColoredFormatter(
            colorfmt,
            datefmt=FORMAT_DATETIME,
            reset=True,
            log_colors={
                "VERBOSE": "light_black",
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red",
            },
        )
    )

    logging.captureWarnings(True)

    # setup file handler
    log_filename = os.path.join(data_path, LOG_FILE)
    file_handler = RotatingFileHandler(log_filename, maxBytes=MAX_LOG_FILESIZE, backupCount=1)
    # rotate log at each start
    with suppress(OSError):
        file_handler.doRollover()
    file_handler.setFormatter(logging.Formatter(log_fmt, datefmt=FORMAT_DATETIME))

    logger = logging.getLogger()
    logger.addHandler(file_handler)
    logging.addLevelName(VERBOSE_LOG_LEVEL, "VERBOSE")

    # apply the configured global log level to the (root) sonos_nowplaying logger
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)

    # silence some noisy loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("soco").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.ERROR)

    threading.excepthook = lambda args: logging.getLogger(None).exception(
        "Uncaught thread exception",
        exc_info=(  # type: ignore[arg-type]
            args.exc_type,
            args.exc_value,
            args.exc_traceback,
        ),
    )

    return logger


async def print_command(hub: SonosNowPlaying, command: str) -> bool:
    """Run an api command and print its result message, return if it succeeded."""
    message = await hub.handle_command(CLI_COMMANDS[command])
    print(json_dumps(message, indent=True), flush=True)  # noqa: T201
    return not isinstance(message, ErrorResultMessage)


async def run_once(hub: SonosNowPlaying, command: str) -> bool:
    """Start the engine, print a single result and stop again."""
    await hub.start()
    try:
        return await print_command(hub, command)
    finally:
        await hub.stop()


def main() -> None:
    """Start Sonos Now Playing."""
    # parse arguments
    args = get_arguments()
    data_dir = args.config
    if not os.path.isdir(data_dir):
        os.makedirs(data_dir)

    log_level = args.log_level.upper()
    if log_level == "VERBOSE":
        log_level = VERBOSE_LOG_LEVEL
    logger = setup_logger(data_dir, log_level)
    hub = SonosNowPlaying(data_dir)

    if not args.watch:
        sys.exit(0 if asyncio.run(run_once(hub, args.command)) else 1)

    def on_shutdown(loop) -> None:
        logger.info("shutdown requested!")
        loop.run_until_complete(hub.stop())

    async def watch() -> None:
        await hub.start()
        while True:
            await print_command(hub, args.command)
            await asyncio.sleep(args.watch)

    run(watch(), shutdown_callback=on_shutdown)


if __name__ == "__main__":
    main()
