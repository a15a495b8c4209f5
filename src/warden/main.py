"""
Warden
======

A Discord bot that runs every guild message through a moderation pipeline:
adaptive slow-mode, link policy, banned-phrase detection, keyword reminders
and invite previews.
"""

import os
import sys
from pathlib import Path

def resolve_base_dir() -> Path:
    """Determine the base directory of the project.
    Resolution order:
    1. WARDEN_HOME environment variable, if set.
    2. If running in a frozen/compiled context (e.g., PyInstaller, Nuitka), use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("WARDEN_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]

BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
from dataclasses import dataclass

import discord
from dotenv import load_dotenv

from warden.configuration.app_configuration import AppConfig
from warden.database.database import Database
from warden.moderation.autoslow_controller import AutoSlowController
from warden.moderation.cooldown_cache import CooldownCache
from warden.moderation.invite_resolver import InviteResolver
from warden.moderation.link_policy_gate import LinkPolicyGate
from warden.moderation.message_pipeline import MessagePipeline
from warden.moderation.phrase_moderation_engine import PhraseModerationEngine
from warden.moderation.trigger_engine import TriggerEngine
from warden.settings.community_settings_service import CommunitySettingsService
from warden.settings.name_memory import NameMemory
from warden.settings.opt_out_store import OptOutStore
from warden.settings.settings_cache import SettingsCache
from warden.util.background import BackgroundTasks
from warden.util.embeds import EmbedFactory
from warden.util.logger import get_logger, handle_exception


logger = get_logger("main")


@dataclass
class Services:
    """Everything built once at startup and shared by the cogs."""
    config: AppConfig
    database: Database
    background: BackgroundTasks
    settings_cache: SettingsCache
    opt_outs: OptOutStore
    names: NameMemory
    pipeline: MessagePipeline


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Raises
    ------
    SystemExit
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def build_intents() -> discord.Intents:
    """Intents enabling guild, member and message content events."""
    intents = discord.Intents.default()
    intents.message_content = True
    intents.guilds = True
    intents.messages = True
    intents.members = True
    return intents


def build_services(bot: discord.Bot, config: AppConfig, database: Database) -> Services:
    """Wire the pipeline components together around one database connection."""
    connection = database.connection
    background = BackgroundTasks()
    embeds = EmbedFactory(config.colors)

    settings_cache = SettingsCache(CommunitySettingsService(connection))
    opt_outs = OptOutStore(connection)

    pipeline = MessagePipeline(
        settings_cache=settings_cache,
        autoslow=AutoSlowController(connection, observation_interval=config.autoslow_observation_interval),
        link_gate=LinkPolicyGate(settings_cache),
        phrases=PhraseModerationEngine(connection, background),
        triggers=TriggerEngine(
            opt_outs,
            CooldownCache(),
            embeds,
            opt_out_label=config.opt_out_label,
            fire_on_first_match=config.fire_on_first_match,
        ),
        invites=InviteResolver(bot, background, embeds, pattern=config.invite_pattern),
        moderator_level=config.moderator_level,
        autoslow_max_level=config.autoslow_max_level,
    )

    return Services(
        config=config,
        database=database,
        background=background,
        settings_cache=settings_cache,
        opt_outs=opt_outs,
        names=NameMemory(connection),
        pipeline=pipeline,
    )


def load_cogs(discord_bot_instance: discord.Bot, services: Services) -> None:
    """Register all operational cogs with the provided Discord bot instance."""
    from warden.bot.cogs import events_listener, message_listener, name_cmds

    events_listener.setup(discord_bot_instance, services.settings_cache, services.opt_outs)
    message_listener.setup(discord_bot_instance, services.pipeline)
    name_cmds.setup(discord_bot_instance, services.settings_cache, services.names)

    logger.info("All cogs loaded successfully.")


def create_bot(config: AppConfig, database: Database) -> tuple[discord.Bot, Services]:
    """Instantiate the Discord bot, its services, and register all cogs."""
    bot = discord.Bot(intents=build_intents())
    services = build_services(bot, config, database)
    load_cogs(bot, services)
    return bot, services


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and handle lifecycle logging around the connection."""
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(bot: discord.Bot | None, services: Services | None, database: Database) -> None:
    """Stop the bot, let detached work settle, and close the database."""
    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception as exc:
            logger.exception("Error while closing the Discord client: %s", exc)

    if services is not None:
        await services.background.shutdown()

    try:
        await database.shutdown()
    except Exception as exc:
        logger.exception("Error during database shutdown: %s", exc)

    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap the database and bot, returning an exit code."""
    token = load_environment()
    config = AppConfig()

    database = Database(config.database_path)
    logger.info("Initializing database...")
    if not await database.initialize():
        logger.critical("Failed to initialize database at %s", config.database_path)
        return 1

    bot = services = None
    exit_code = 0
    try:
        bot, services = create_bot(config, database)
        await start_bot(bot, token)
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot, services, database)

    return exit_code


def main() -> int:
    """Entrypoint that orchestrates the async runtime and returns the process code."""
    sys.excepthook = handle_exception
    logger.info("Starting Warden…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        return 1
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
