#!/usr/bin/env python3
"""
Colour tuner - Main Entry Point

Usage:
    colour-tuner                              # OpenCV window against localhost:8080
    colour-tuner --url http://robot:8080      # Another server
    colour-tuner --headless                   # Terminal commands, no display
"""

import argparse
import asyncio
import logging

from .config import BASE_URL


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Live HSV colour range tuner")
    parser.add_argument(
        "--url",
        default=BASE_URL,
        help="Base URL of the tuning server (default: %(default)s)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Use the terminal console instead of the OpenCV window",
    )
    parser.add_argument(
        "--name",
        default="",
        help="Initial colour name for the snippet and commit",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds (default: aiohttp's)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    args = parser.parse_args()

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Colour tuner starting against {args.url}")

    from .session import TunerSession

    async def run():
        async with TunerSession(args.url, acknowledge=print, timeout=args.timeout) as session:
            if args.name:
                session.on_name_input(args.name)

            if args.headless:
                from .ui.console import TunerConsole

                console = TunerConsole(session)
                await session.start()
                console.show()
                await console.run()
            else:
                from .ui.window import TunerWindow

                window = TunerWindow(session)
                window.open()
                await session.start()
                await window.run()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
