"""Discord bot entry point."""
import asyncio

from dotenv import load_dotenv

from wowbot import logging_client
from wowbot.client import DiscordBotClient
from wowbot.container import Container
from wowbot.health_server import HealthCheckServer


async def main():
    """Main entry point."""
    logger = logging_client.setup_logger('wowbot')
    logger.info("Initializing Discord bot...")

    container = Container()
    settings = container.settings()

    bot = DiscordBotClient(
        settings,
        lifecycle=container.session_lifecycle(),
        router=container.message_router()
    )

    health_server = HealthCheckServer(service_name="wowbot", port=settings.HEALTH_PORT)
    health_server.register_check("discord", bot.is_healthy)
    health_server.start()

    logger.info("Starting Discord bot...")
    try:
        async with bot:
            await bot.start(settings.DISCORD_TOKEN)
    finally:
        health_server.stop()
        await container.openai_client().close()


def run():
    load_dotenv()
    asyncio.run(main())


if __name__ == "__main__":
    run()
