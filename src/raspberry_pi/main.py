#!/usr/bin/env python3
"""
Target-seeking rover - Main Entry Point

Usage:
    python main.py           # Run navigation controller
    python main.py --web     # Also serve the debug web interface
"""

import argparse
import asyncio
import logging


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Target-seeking rover controller")
    parser.add_argument(
        "--web",
        action="store_true",
        help="Enable web interface for debugging",
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
    logger.info("Rover starting...")

    from control import Controller

    controller = Controller()

    if args.web:
        from web import run_server

        async def run_with_web():
            runner = await run_server(controller=controller)
            try:
                await controller.run()
            finally:
                await runner.cleanup()

        asyncio.run(run_with_web())
    else:
        asyncio.run(controller.run())


if __name__ == "__main__":
    main()
