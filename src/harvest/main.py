"""
Main entry point for Farmer Harvest.

Loads settings from the environment, starts the level config load in the
background and runs the desktop window.
"""

import asyncio
import logging
import random
import sys

from harvest.config.settings import Settings, get_settings


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


async def run_game(settings: Settings) -> None:
    """Wire the session to the window and run until the window closes."""
    from harvest.config.levels import LevelConfigLoader
    from harvest.config.theme import load_theme
    from harvest.core.events import EventBus
    from harvest.game.session import HarvestGame
    from harvest.simulator.keyboard import KeyboardInput
    from harvest.simulator.window import GameWindow, WindowConfig

    event_bus = EventBus()
    loader = LevelConfigLoader(
        settings.levels_source,
        timeout=settings.levels_timeout,
        event_bus=event_bus,
    )
    loader.begin()

    keyboard = KeyboardInput()
    game = HarvestGame(
        loader,
        event_bus=event_bus,
        rng=random.Random(settings.seed),
        read_input=keyboard.snapshot,
        field_width=settings.playfield.width,
        field_height=settings.playfield.height,
        tile=settings.playfield.tile,
    )

    window = GameWindow(
        game,
        theme=load_theme(settings.theme_file),
        config=WindowConfig.from_settings(settings),
        keyboard=keyboard,
    )
    await window.run()


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    settings = get_settings()
    setup_logging(settings.debug)

    logger = logging.getLogger(__name__)
    logger.info("Farmer Harvest starting...")

    try:
        asyncio.run(run_game(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("Farmer Harvest stopped")


if __name__ == "__main__":
    main()
