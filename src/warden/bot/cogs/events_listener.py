"""Event listener Cog for Warden.

Handles bot lifecycle events, the persistent "Don't remind me again" button
attached to trigger replies, and guild removal.
"""

import discord
from discord.ext import commands

from warden.errors import StorageUnavailable
from warden.moderation.trigger_engine import OPT_OUT_PREFIX
from warden.settings.opt_out_store import OptOutStore
from warden.settings.settings_cache import SettingsCache
from warden.util.logger import get_logger

logger = get_logger("events_listener_cog")


def parse_opt_out_id(custom_id: str | None) -> str | None:
    """Trigger id encoded in an opt-out button's custom id, or None for other components."""
    if not custom_id or not custom_id.startswith(OPT_OUT_PREFIX):
        return None
    return custom_id[len(OPT_OUT_PREFIX):] or None


class EventsListenerCog(commands.Cog):
    """Cog containing bot lifecycle and interaction handlers."""

    def __init__(self, discord_bot_instance, settings_cache: SettingsCache, opt_outs: OptOutStore):
        """Initialize the events listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        settings_cache:
            Cache invalidated when the bot leaves a guild.
        opt_outs:
            Store receiving trigger opt-outs.
        """
        self.bot = discord_bot_instance
        self.settings_cache = settings_cache
        self.opt_outs = opt_outs
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name='on_ready')
    async def on_ready(self):
        if self.bot.user:
            logger.info(f"Bot connected as {self.bot.user} (ID: {self.bot.user.id})")
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

        logger.info("--==--==--==--==--==--==--==--==--==--==--==--==--==--==--==--==--")

    @commands.Cog.listener(name='on_guild_remove')
    async def on_guild_remove(self, guild: discord.Guild):
        self.settings_cache.invalidate(guild.id)
        logger.info("Removed from guild %s, cached settings dropped", guild.id)

    @commands.Cog.listener(name='on_interaction')
    async def on_interaction(self, interaction: discord.Interaction):
        """Record an opt-out when a trigger reply's button is pressed."""
        if interaction.type is not discord.InteractionType.component:
            return

        data = interaction.data or {}
        trigger_id = parse_opt_out_id(data.get("custom_id"))
        if trigger_id is None or interaction.guild_id is None:
            return

        try:
            await self.opt_outs.opt_out(interaction.guild_id, interaction.user.id, trigger_id)
        except StorageUnavailable as exc:
            logger.error("[OPT OUT] Could not store opt-out for trigger %s: %s", trigger_id, exc)
            await self._respond(interaction, "Something went wrong, please try again later.")
            return

        logger.debug("[OPT OUT] User %s opted out of trigger %s", interaction.user.id, trigger_id)
        await self._respond(interaction, "You won't be reminded about this again.")

    @staticmethod
    async def _respond(interaction: discord.Interaction, content: str) -> None:
        try:
            await interaction.response.send_message(content, ephemeral=True)
        except discord.InteractionResponded:
            await interaction.followup.send(content, ephemeral=True)
        except discord.HTTPException as exc:
            logger.debug("[OPT OUT] Could not answer interaction %s: %s", interaction.id, exc)


def setup(discord_bot_instance, settings_cache: SettingsCache, opt_outs: OptOutStore):
    """Register the EventsListenerCog with the bot.

    Parameters
    ----------
    discord_bot_instance:
        The Discord bot instance to add this cog to.
    """
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance, settings_cache, opt_outs))
