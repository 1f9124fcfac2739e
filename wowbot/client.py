"""Discord bot client."""
import discord
from discord.ext import commands

from wowbot import logging_client
from wowbot.config import BotSettings
from wowbot.lifecycle import SessionLifecycle
from wowbot.router import MessageRouter
from wowbot.utils import scope_id_for

logger = logging_client.setup_logger('wowbot')


class DiscordBotClient(commands.Bot):
    """Discord bot that answers in joined channels through an OpenAI assistant."""

    def __init__(self, settings: BotSettings, lifecycle: SessionLifecycle, router: MessageRouter):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.messages = True

        super().__init__(command_prefix="!", intents=intents)

        self.settings = settings
        self.lifecycle = lifecycle
        self.router = router

        # Register slash commands (tree is already created by commands.Bot)
        self._register_commands()

    def _register_commands(self):
        """Register slash commands."""
        bot_name = self.settings.BOT_NAME

        @self.tree.command(name="join", description=f"Join {bot_name} to this text channel")
        async def join_command(interaction: discord.Interaction):
            await self.handle_join(interaction)

        @self.tree.command(name="leave", description=f"Remove {bot_name} from this text channel")
        async def leave_command(interaction: discord.Interaction):
            await self.handle_leave(interaction)

    async def handle_join(self, interaction: discord.Interaction):
        """Start a fresh assistant session in the invoking channel."""
        channel_id = str(interaction.channel_id)
        scope_id = scope_id_for(interaction.guild_id)

        # Creating the thread and saving it can outlast the 3s interaction window
        await interaction.response.defer()

        try:
            await self.lifecycle.join(channel_id, scope_id)
        except Exception as e:
            logger.error(f"Error joining channel {scope_id}/{channel_id}: {e}")
            await interaction.followup.send("Failed to join the channel.")
            return

        await interaction.followup.send(
            f"{self.settings.BOT_NAME} is now active in this channel! I will respond to messages here."
        )

    async def handle_leave(self, interaction: discord.Interaction):
        """End the assistant session in the invoking channel."""
        channel_id = str(interaction.channel_id)
        scope_id = scope_id_for(interaction.guild_id)

        await interaction.response.defer()

        try:
            await self.lifecycle.leave(channel_id, scope_id)
        except Exception as e:
            logger.error(f"Error leaving channel {scope_id}/{channel_id}: {e}")
            await interaction.followup.send("Failed to leave the channel.")
            return

        await interaction.followup.send(
            f"{self.settings.BOT_NAME} has left this channel. Use /join to reactivate me here."
        )

    async def setup_hook(self):
        """Setup hook called when bot starts."""
        await self.tree.sync()
        logger.info("✅ Slash commands synced globally")

    async def on_ready(self):
        """Called when bot is ready."""
        logger.info(f"✅ Logged in as {self.user.name} ({self.user.id})")

    async def on_message(self, message: discord.Message):
        """
        Handle incoming messages.

        Args:
            message: Discord message object
        """
        # Ignore own messages
        if message.author == self.user:
            return

        await self.router.handle_message(message)

    def is_healthy(self) -> bool:
        """Gateway connection is up."""
        return self.is_ready() and not self.is_closed()
