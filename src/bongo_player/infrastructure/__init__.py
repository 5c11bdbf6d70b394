"""Infrastructure layer - external systems integration.

- audio/: yt-dlp resolver and temporary track storage
- discord/: bot, cogs, voice adapter, panel view
"""
