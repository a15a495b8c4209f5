"""User context commands for member names."""

import discord
from discord.ext import commands

from warden.errors import StorageUnavailable
from warden.settings.name_memory import NameMemory
from warden.settings.settings_cache import SettingsCache
from warden.util import permissions
from warden.util.logger import get_logger

logger = get_logger("name_cmds_cog")


class NameCommandsCog(commands.Cog):
    """Replaces decorative unicode usernames with a readable ASCII nickname."""

    def __init__(self, discord_bot_instance, settings_cache: SettingsCache, names: NameMemory):
        self.bot = discord_bot_instance
        self.settings_cache = settings_cache
        self.names = names
        logger.info("Name commands cog loaded")

    async def ascii_name(self, member: discord.Member) -> str:
        """
        Nickname ``member`` with the ASCII form of their username.

        Returns:
            The message to show to the invoker.
        """
        settings = await self.settings_cache.resolve(member.guild.id)
        if permissions.permission_level(member, settings) >= permissions.HELPER:
            return "Helper and above cannot be nicknamed"

        name = await self.names.remember_ascii_name(member.id, member.guild.id, member.name)
        if not name:
            return "Name couldn't be converted to ASCII"

        try:
            await member.edit(nick=name)
        except discord.HTTPException as exc:
            logger.warning("Could not rename member %s: %s", member.id, exc)
            return "Name was stored but the member couldn't be renamed"
        return "User renamed successfully"

    @discord.user_command(name="ASCII Name", default_member_permissions=discord.Permissions(administrator=True))
    async def ascii_name_command(self, application_context: discord.ApplicationContext, member: discord.Member):
        if not isinstance(member, discord.Member):
            await application_context.respond("ASCII name only works on guild members", ephemeral=True)
            return

        try:
            content = await self.ascii_name(member)
        except StorageUnavailable as exc:
            logger.error("ASCII name failed for %s: %s", member.id, exc)
            content = "Something went wrong, please try again later."
        await application_context.respond(content, ephemeral=True)


def setup(discord_bot_instance, settings_cache: SettingsCache, names: NameMemory):
    discord_bot_instance.add_cog(NameCommandsCog(discord_bot_instance, settings_cache, names))
