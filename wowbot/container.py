"""
Dependency Injection Container

Builds the OpenAI client, the DynamoDB session store and the bot services
once at startup and wires them together with dependency-injector.
"""

from dependency_injector import containers, providers
from openai import AsyncOpenAI

from wowbot.backlog import BacklogReplayer
from wowbot.config import BotSettings
from wowbot.lifecycle import SessionLifecycle
from wowbot.router import MessageRouter
from wowbot.run_driver import RunDriver
from wowbot.session_store import DynamoDBSessionStore


class Container(containers.DeclarativeContainer):
    """
    Application dependency injection container.

    Usage:
        container = Container()
        router = container.message_router()

        # Override for testing
        container.settings.override(providers.Object(test_settings))
        container.session_store.override(FakeSessionStore())
    """

    settings = providers.Singleton(BotSettings)

    # ========== Clients ==========

    openai_client = providers.Singleton(
        AsyncOpenAI,
        api_key=settings.provided.OPENAI_API_KEY,
        timeout=settings.provided.OPENAI_TIMEOUT_SECONDS
    )

    # ========== Repositories ==========

    session_store = providers.Singleton(
        DynamoDBSessionStore,
        table_name=settings.provided.DYNAMODB_TABLE,
        region=settings.provided.AWS_REGION,
        endpoint_url=settings.provided.DYNAMODB_ENDPOINT,
        access_key=settings.provided.AWS_ACCESS_KEY_ID,
        secret_key=settings.provided.AWS_SECRET_ACCESS_KEY
    )

    # ========== Services ==========

    run_driver = providers.Singleton(
        RunDriver,
        client=openai_client,
        assistant_id=settings.provided.ASSISTANT_ID,
        poll_interval=settings.provided.POLL_INTERVAL_SECONDS,
        backoff_factor=settings.provided.POLL_BACKOFF_FACTOR,
        max_poll_interval=settings.provided.POLL_MAX_INTERVAL_SECONDS,
        poll_timeout=settings.provided.POLL_TIMEOUT_SECONDS
    )

    backlog_replayer = providers.Singleton(
        BacklogReplayer,
        run_driver=run_driver,
        fetch_limit=settings.provided.BACKLOG_FETCH_LIMIT,
        replay_once=settings.provided.REPLAY_BACKLOG_ONCE
    )

    session_lifecycle = providers.Singleton(
        SessionLifecycle,
        session_store=session_store,
        run_driver=run_driver
    )

    message_router = providers.Singleton(
        MessageRouter,
        session_store=session_store,
        run_driver=run_driver,
        replayer=backlog_replayer,
        max_reply_length=settings.provided.MAX_REPLY_LENGTH,
        notify_on_error=settings.provided.NOTIFY_ON_ERROR
    )
