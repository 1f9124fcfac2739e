"""Utility functions for Discord bot."""
from typing import Optional

from wowbot.models import DIRECT_MESSAGE_SCOPE


def truncate_reply(content: str, max_length: int = 2000) -> str:
    """
    Cut a reply down to Discord's message length limit.

    Args:
        content: Reply text
        max_length: Maximum length (Discord limit: 2000)

    Returns:
        content unchanged if it fits, otherwise its first max_length characters
    """
    if len(content) <= max_length:
        return content
    return content[:max_length]


def scope_id_for(guild_id: Optional[int]) -> str:
    """Session scope for a guild ID; direct messages share one scope."""
    return str(guild_id) if guild_id is not None else DIRECT_MESSAGE_SCOPE
