"""DynamoDB table initialization for WoWBot.

Creates the channel sessions table (default: DiscordOpenAIThreads) if it
doesn't exist. Point DYNAMODB_ENDPOINT at DynamoDB Local for development.
"""
import asyncio

from dotenv import load_dotenv

from wowbot.config import BotSettings
from wowbot.session_store import DynamoDBSessionStore


async def initialize_tables():
    """Create the sessions table if it doesn't exist."""
    settings = BotSettings()
    store = DynamoDBSessionStore(
        table_name=settings.DYNAMODB_TABLE,
        region=settings.AWS_REGION,
        endpoint_url=settings.DYNAMODB_ENDPOINT,
        access_key=settings.AWS_ACCESS_KEY_ID,
        secret_key=settings.AWS_SECRET_ACCESS_KEY
    )
    return await store.initialize_table()


if __name__ == "__main__":
    load_dotenv()
    created = asyncio.run(initialize_tables())
    print("✅ Table created" if created else "✓ Table already exists")
