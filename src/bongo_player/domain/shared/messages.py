"""Centralized message constants for error messages, log templates, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Track Validation Errors
    EMPTY_TRACK_TITLE = "Track title cannot be empty"
    NEGATIVE_DURATION = "Duration cannot be negative"

    # Request Validation Errors
    EMPTY_QUERY = "Query cannot be empty"
    MISSING_GUILD = "This command can only be used in a server."
    NOT_IN_VOICE = "You need to be in a voice channel to use this command!"
    UNKNOWN_CONTROL = "Unknown control action: {custom_id}"
    CONTROL_NOT_IMPLEMENTED = "Control '{custom_id}' is not available yet."

    # Resolution Errors
    RESOLVER_EXIT_CODE = "yt-dlp exited with code {code}"
    RESOLVER_TIMEOUT = "yt-dlp timed out after {seconds}s"
    RESOLVER_OUTPUT_TOO_LARGE = "yt-dlp output exceeded {limit} bytes"
    RESOLVER_NOT_STARTED = "Could not start yt-dlp: {error}"
    RESOLVER_NO_RECORDS = "yt-dlp produced no usable records"

    # Playback / Transport Errors
    FILE_MISSING = "Backing file for '{title}' is missing"
    SESSION_CLOSED = "Session for guild {guild_id} is closed"
    VOICE_CHANNEL_NOT_FOUND = "Voice channel {channel_id} not found"
    VOICE_JOIN_TIMEOUT = "Timed out joining voice channel {channel_id}"
    VOICE_JOIN_FORBIDDEN = "No permission to join voice channel {channel_id}"
    PLAYER_NOT_SUBSCRIBED = "Audio player is not subscribed to a connection"

    # Settings Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64 - 1)"
    INVALID_AUDIO_FORMAT = "Unsupported audio format: {value}"
    EMPTY_RESOLVER_COMMAND = "Resolver command cannot be empty"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    FFMPEG_NOT_FOUND = "ffmpeg was not found on PATH; voice playback needs it"
    RESOLVER_COMMAND_NOT_FOUND = "Resolver executable {command!r} was not found"
    TEMP_DIR_UNUSABLE = "Cannot create temp directory {path}: {error}"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Bot has no container attached"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Bot Lifecycle
    BOT_STARTING = "Starting bot (environment=%s)"
    BOT_STOPPED = "Bot stopped"
    BOT_AUDIO_CONFIG = "Audio: format=%s, temp dir=%s, idle disconnect=%ss"
    BOT_RUNTIME_CHECK_FAILED = "Startup check failed: %s"
    LOGGING_CONFIG_FALLBACK = "Could not load %s (%s), falling back to basic config"
    BOT_KEYBOARD_INTERRUPT = "Interrupted, shutting down"
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SETUP = "Running setup hook"
    BOT_SETUP_COMPLETE = "Setup complete"
    BOT_READY = "Logged in as %s (id=%s)"
    BOT_COG_LOADED = "Loaded cog %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_SYNCED_GUILD = "Synced %d commands to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync commands to guild %s: %s"
    BOT_SYNCED_GLOBAL = "Synced %d global commands"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync global commands: %s"
    BOT_SLASH_COMMAND_ERROR = "Slash command '%s' failed: %s"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"
    BOT_SHUTTING_DOWN = "Shutting down"
    BOT_SHUTDOWN_COMPLETE = "Shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"

    # Resolver
    RESOLVER_STARTED = "Resolving '%s' (url=%s)"
    RESOLVER_RESOLVED = "Resolved '%s' -> '%s' (%s)"
    RESOLVER_FAILED = "Resolution failed for '%s': %s"
    RESOLVER_STDERR = "yt-dlp stderr for '%s': %s"
    RESOLVER_SKIPPED_PLAYLIST = "Ignoring playlist record for '%s'"
    RESOLVER_SKIPPED_MALFORMED = "Skipping malformed record for '%s' (missing %s)"
    RESOLVER_BAD_JSON = "Skipping unparseable yt-dlp line for '%s': %s"

    # Temp Storage
    STORAGE_READY = "Temp storage ready at %s"
    STORAGE_RELEASED = "Released file %s"
    STORAGE_RELEASE_FAILED = "Failed to delete file %s: %s"
    STORAGE_PURGED = "Purged %d leftover files from %s"

    # Registry
    SESSION_CREATED = "Created session for guild %s in channel %s"
    SESSION_REUSED = "Reusing session for guild %s"
    SESSION_RELEASED = "Released session for guild %s"
    SESSION_NOT_FOUND = "No session found for guild %s"
    SESSION_SETUP_FAILED = "Player setup failed in guild %s, leaving voice"
    SESSION_IDLE_DISCONNECT = "Guild %s idle for %ss, disconnecting"

    # Actor
    ACTOR_STARTED = "Actor started for guild %s"
    ACTOR_STOPPED = "Actor stopped for guild %s"
    ACTOR_MESSAGE_FAILED = "Actor message failed in guild %s"
    ACTOR_EVENT_AFTER_CLOSE = "Ignoring %s for closed session in guild %s"

    # Playback
    TRACK_ENQUEUED = "Enqueued '%s' in guild %s (pending=%d)"
    TRACK_STARTED = "Started playing '%s' in guild %s"
    TRACK_FINISHED = "Track finished in guild %s"
    TRACK_FILE_MISSING = "Backing file missing for '%s' in guild %s, skipping"
    TRACK_DISCARDED = "Discarding '%s': session for guild %s closed during resolution"
    PLAYBACK_ERROR = "Playback error in guild %s: %s"
    PLAYBACK_START_FAILED = "Transport refused '%s' in guild %s: %s"
    PLAYBACK_ADVANCE_EXHAUSTED = "Gave up advancing after %d attempts in guild %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    QUEUE_EMPTY = "Queue empty in guild %s"
    MODE_CHANGED = "Play mode changed to %s in guild %s"

    # Voice
    VOICE_CONNECTED = "Connected to voice channel %s in guild %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_DISCONNECT_FAILED = "Failed to disconnect voice in guild %s: %s"
    VOICE_PLAYER_EVENT = "Player event %s in guild %s (error: %s)"

    # Dispatcher / Jobs
    CONTROL_DISPATCHED = "Dispatched %s in guild %s"
    CONTROL_NO_SESSION = "Control %s ignored: nothing playing in guild %s"
    JOB_SUBMITTED = "Submitted play job for '%s' in guild %s"
    JOB_FAILED = "Play job failed for '%s' in guild %s"
    JOB_JOIN_FAILED = "Could not join voice in guild %s: %s"
    JOB_CANCELLED = "Cancelled %d in-flight play jobs"
    FOLLOWUP_FAILED = "Failed to deliver follow-up: %s"
    OUTPUT_SEND_FAILED = "Failed to post to output channel in guild %s: %s"
    PANEL_EDIT_FAILED = "Failed to re-render panel: %s"


class DiscordUIMessages:
    """User-facing strings shown in Discord."""

    # Play flow
    PLAY_ADDED = "Added to queue: **{title}**"
    PLAY_NO_RESULTS = "No results found for: `{query}`"
    PLAY_JOIN_FAILED = "Could not join your voice channel."
    PLAY_FAILED = "❌ Error while processing the command."
    PLAY_SESSION_STOPPED = "Playback was stopped before **{title}** could be queued."

    # State
    STATE_NOTHING_PLAYING = "Nothing is playing in this server."
    STATE_QUEUE_EMPTY_NOTICE = "Queue is empty. Disconnecting in {minutes} minutes if nothing is added."
    STATE_QUEUE_EMPTY = "Queue is empty."

    # Controls
    CONTROL_SKIPPED = "Skipped."
    CONTROL_PAUSED = "Paused."
    CONTROL_RESUMED = "Resumed."
    CONTROL_STOPPED = "Stopped playback and left the channel."
    CONTROL_LOOP = "Loop: {state}"
    CONTROL_SHUFFLE = "Shuffle: {state}"
    CONTROL_NOOP = "Nothing to pause or resume."

    # Panel
    EMBED_PANEL_TITLE = "🎶 MUSIC PANEL"
    FIELD_REQUESTED_BY = "👤 Requested By"
    FIELD_DURATION = "⏱️ Music Duration"
    FIELD_AUTHOR = "🎤 Music Author"
    FOOTER_MODES = "Loop: {loop} | Shuffle: {shuffle}"
    FLAG_ON = "✅"
    FLAG_OFF = "❌"
