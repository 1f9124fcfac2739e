"""Session storage implementation using DynamoDB.

Maps a Discord channel (scoped by guild) to its OpenAI assistant thread.
The item layout matches the existing DiscordOpenAIThreads table:
guildId (HASH), discordThreadId (RANGE), openAiThreadId, createdAt.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import aioboto3
from botocore.exceptions import ClientError

from wowbot import logging_client
from wowbot.models import Session

logger = logging_client.setup_logger('wowbot')


class DynamoDBSessionStore:
    """
    Channel session storage using DynamoDB.

    Single Responsibility: persist the channel -> assistant thread mapping
    Implements: ISessionStore
    """

    def __init__(
        self,
        table_name: str = "DiscordOpenAIThreads",
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None
    ):
        self.table_name = table_name
        self.session = aioboto3.Session()
        self._resource_config = {'region_name': region}
        # Unset values fall back to the default AWS credential chain
        if endpoint_url:
            self._resource_config['endpoint_url'] = endpoint_url
        if access_key and secret_key:
            self._resource_config['aws_access_key_id'] = access_key
            self._resource_config['aws_secret_access_key'] = secret_key

    @asynccontextmanager
    async def _get_table(self):
        """Get table within a context manager to properly manage the session lifecycle."""
        async with self.session.resource('dynamodb', **self._resource_config) as dynamodb:
            table = await dynamodb.Table(self.table_name)
            yield table

    @staticmethod
    def _key(channel_id: str, scope_id: str) -> dict:
        return {'guildId': scope_id, 'discordThreadId': channel_id}

    async def initialize_table(self) -> bool:
        """
        Create the sessions table if it doesn't exist.

        Returns:
            True if the table was created, False if it already existed
        """
        async with self.session.resource('dynamodb', **self._resource_config) as dynamodb:
            try:
                table = await dynamodb.create_table(
                    TableName=self.table_name,
                    KeySchema=[
                        {'AttributeName': 'guildId', 'KeyType': 'HASH'},
                        {'AttributeName': 'discordThreadId', 'KeyType': 'RANGE'}
                    ],
                    AttributeDefinitions=[
                        {'AttributeName': 'guildId', 'AttributeType': 'S'},
                        {'AttributeName': 'discordThreadId', 'AttributeType': 'S'}
                    ],
                    BillingMode='PAY_PER_REQUEST'
                )
                await table.wait_until_exists()
                logger.info(f"✅ '{self.table_name}' table created")
                return True
            except ClientError as e:
                if e.response['Error']['Code'] == 'ResourceInUseException':
                    logger.info(f"✓ '{self.table_name}' table already exists")
                    return False
                raise

    async def get(self, channel_id: str, scope_id: str) -> Optional[str]:
        """
        Look up the assistant thread for a channel.

        Fails soft: a backend error is logged and reported as "no session",
        which keeps the bot silent in that channel.

        Returns:
            Assistant thread ID, or None
        """
        try:
            async with self._get_table() as table:
                response = await table.get_item(Key=self._key(channel_id, scope_id))
        except Exception as e:
            logger.error(f"Error fetching session for {scope_id}/{channel_id} from DynamoDB: {e}")
            return None

        item = response.get('Item')
        if not item:
            return None
        return item.get('openAiThreadId')

    async def create(self, channel_id: str, ai_thread_id: str, scope_id: str) -> Session:
        """Insert or overwrite the session for a channel. Errors propagate."""
        session = Session(
            channel_id=channel_id,
            scope_id=scope_id,
            ai_thread_id=ai_thread_id,
            created_at=datetime.now(timezone.utc)
        )

        async with self._get_table() as table:
            await table.put_item(Item={
                **self._key(channel_id, scope_id),
                'openAiThreadId': ai_thread_id,
                'createdAt': session.created_at.isoformat()
            })

        logger.debug(f"Saved session {scope_id}/{channel_id} -> {ai_thread_id}")
        return session

    async def remove(self, channel_id: str, scope_id: str) -> None:
        """Delete the session for a channel. Deleting an absent key is a no-op."""
        async with self._get_table() as table:
            await table.delete_item(Key=self._key(channel_id, scope_id))

        logger.debug(f"Removed session {scope_id}/{channel_id}")
