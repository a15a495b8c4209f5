"""Message listener Cog for Warden.

Feeds every message the bot sees into the moderation pipeline.
"""

import discord
from discord.ext import commands

from warden.moderation.message_pipeline import MessagePipeline
from warden.util.logger import get_logger

logger = get_logger("message_listener_cog")


class MessageListenerCog(commands.Cog):
    """Cog responsible for handling message creation events."""

    def __init__(self, discord_bot_instance, pipeline: MessagePipeline):
        """
        Initialize the message listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        pipeline:
            The pipeline every message is handed to.
        """
        self.bot = discord_bot_instance
        self.pipeline = pipeline
        logger.info("Message listener cog loaded")

    @commands.Cog.listener(name='on_message')
    async def on_message(self, message: discord.Message):
        """Run the message through the pipeline. Errors never reach the gateway loop."""
        try:
            await self.pipeline.handle(message)
        except Exception as exc:
            logger.error("[MESSAGE LISTENER] Unhandled error for message %s: %s", message.id, exc, exc_info=True)


def setup(discord_bot_instance, pipeline: MessagePipeline):
    """
    Register the MessageListenerCog with the bot.

    Parameters
    ----------
    discord_bot_instance:
        The Discord bot instance to add this cog to.
    pipeline:
        The message pipeline built at startup.
    """
    # Tests may pass an object without add_cog; the cog is still constructed.
    cog = MessageListenerCog(discord_bot_instance, pipeline)
    add_cog = getattr(discord_bot_instance, "add_cog", None)
    if add_cog is None:
        return cog

    add_cog(cog)
    return cog
