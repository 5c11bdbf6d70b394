"""Discord integration built on discord.py."""
