"""Sync the /join and /leave slash commands to a specific guild for instant updates."""
import asyncio
import sys

import discord
from discord import app_commands
from dotenv import load_dotenv

from wowbot.config import BotSettings


class CommandSyncBot(discord.Client):
    """Minimal bot to sync commands."""

    def __init__(self, guild_id: int, bot_name: str):
        intents = discord.Intents.default()
        super().__init__(intents=intents)
        self.tree = app_commands.CommandTree(self)
        self.guild_id = guild_id
        self.bot_name = bot_name

    async def setup_hook(self):
        """Register commands and sync."""
        @self.tree.command(name="join", description=f"Join {self.bot_name} to this text channel")
        async def join_command(interaction: discord.Interaction):
            pass

        @self.tree.command(name="leave", description=f"Remove {self.bot_name} from this text channel")
        async def leave_command(interaction: discord.Interaction):
            pass

        guild = discord.Object(id=self.guild_id)
        self.tree.copy_global_to(guild=guild)
        await self.tree.sync(guild=guild)
        print(f"✅ Commands synced to guild {self.guild_id}")
        print("  • /join - Start answering in a channel")
        print("  • /leave - Stop answering in a channel")

        await self.close()


async def main(guild_id: int):
    """Run the sync bot."""
    print("🔄 Syncing slash commands to your Discord server...\n")

    settings = BotSettings()
    client = CommandSyncBot(guild_id, settings.BOT_NAME)
    async with client:
        await client.start(settings.DISCORD_TOKEN)


if __name__ == "__main__":
    load_dotenv()

    if len(sys.argv) < 2 or not sys.argv[1].strip().isdigit():
        print("Usage: python scripts/sync_commands.py <GUILD_ID>")
        sys.exit(1)

    asyncio.run(main(int(sys.argv[1].strip())))
