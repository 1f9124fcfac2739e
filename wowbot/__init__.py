"""WoWBot: Discord channels bridged to OpenAI Assistants threads."""
