"""
Unit Tests for Bot Lifecycle

Tests for src/bongo_player/infrastructure/discord/bot.py:
- Intents and container wiring on construction
- setup_hook: container init, cog loading, error handler, command sync, persistent panel
- Slash command error handler
- Presence on ready
- Idempotent close with container shutdown
"""

from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import discord
import pytest
from discord.ext import commands

from bongo_player.domain.shared.messages import DiscordUIMessages
from bongo_player.infrastructure.discord.bot import COGS, MusicBot, create_bot
from bongo_player.infrastructure.discord.views.playback_panel_view import PlaybackPanelView


@pytest.fixture
def mock_settings():
    settings = MagicMock()
    settings.discord.application_id = None
    settings.discord.sync_on_startup = False
    settings.discord.guild_ids = ()
    return settings


@pytest.fixture
def mock_container():
    container = MagicMock()
    container.initialize = AsyncMock()
    container.shutdown = AsyncMock()
    container.set_bot = MagicMock()
    return container


@pytest.fixture
def bot(mock_container, mock_settings):
    return MusicBot(container=mock_container, settings=mock_settings)


# =============================================================================
# Initialization
# =============================================================================


class TestBotInitialization:
    async def test_intents(self, bot):
        """Should request only the gateway intents voice playback needs."""
        assert bot.intents.voice_states is True
        assert bot.intents.guilds is True
        assert bot.intents.message_content is False

    async def test_registers_with_container(self, bot, mock_container):
        """Should hand itself to the container for the voice transport."""
        mock_container.set_bot.assert_called_once_with(bot)
        assert bot.container is mock_container

    async def test_create_bot(self, mock_container, mock_settings):
        created = create_bot(mock_container, mock_settings)

        assert isinstance(created, MusicBot)
        assert created.settings is mock_settings


# =============================================================================
# setup_hook
# =============================================================================


class TestSetupHook:
    async def test_setup_hook_wires_everything(self, bot, mock_container):
        """Should init the container, load cogs, install the error handler and panel view."""
        with (
            patch.object(bot, "load_extension", new_callable=AsyncMock) as load,
            patch.object(bot, "add_view") as add_view,
            patch.object(bot, "_sync_commands", new_callable=AsyncMock) as sync,
        ):
            await bot.setup_hook()

        mock_container.initialize.assert_awaited_once()
        assert [c.args[0] for c in load.await_args_list] == list(COGS)
        assert bot.tree.on_error == bot._on_app_command_error
        sync.assert_not_awaited()
        assert isinstance(add_view.call_args.args[0], PlaybackPanelView)

    async def test_sync_when_enabled(self, bot, mock_settings):
        mock_settings.discord.sync_on_startup = True
        with (
            patch.object(bot, "load_extension", new_callable=AsyncMock),
            patch.object(bot, "add_view"),
            patch.object(bot, "_sync_commands", new_callable=AsyncMock) as sync,
        ):
            await bot.setup_hook()

        sync.assert_awaited_once()

    async def test_cog_load_failure_is_fatal(self, bot):
        """Should re-raise extension errors so a broken bot never starts."""
        error = commands.ExtensionNotFound("bongo_player.missing")
        with patch.object(bot, "load_extension", new_callable=AsyncMock, side_effect=error):
            with pytest.raises(commands.ExtensionError):
                await bot._load_cogs()


class TestSyncCommands:
    async def test_global_sync_without_guilds(self, bot):
        with patch.object(bot.tree, "sync", new_callable=AsyncMock, return_value=[MagicMock()]) as sync:
            await bot._sync_commands()

        sync.assert_awaited_once_with()

    async def test_guild_sync_skips_global(self, bot, mock_settings):
        """Should copy global commands to each configured guild and skip the global sync."""
        mock_settings.discord.guild_ids = (111, 222)
        with (
            patch.object(bot.tree, "copy_global_to") as copy,
            patch.object(bot.tree, "sync", new_callable=AsyncMock, return_value=[]) as sync,
        ):
            await bot._sync_commands()

        assert copy.call_count == 2
        assert [c.kwargs["guild"].id for c in sync.await_args_list] == [111, 222]

    async def test_sync_failures_are_logged(self, bot, caplog):
        failure = discord.HTTPException(MagicMock(status=500, reason="x"), "boom")
        with patch.object(bot.tree, "sync", new_callable=AsyncMock, side_effect=failure):
            await bot._sync_commands()

        assert "Failed to sync global commands" in caplog.text


# =============================================================================
# Error handler
# =============================================================================


def _interaction(*, done: bool) -> MagicMock:
    interaction = MagicMock()
    interaction.command.name = "play"
    interaction.response.is_done.return_value = done
    interaction.response.send_message = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


class TestAppCommandErrorHandler:
    async def test_responds_ephemerally(self, bot):
        interaction = _interaction(done=False)

        await bot._on_app_command_error(interaction, RuntimeError("x"))

        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.PLAY_FAILED, ephemeral=True
        )

    async def test_uses_followup_after_defer(self, bot):
        interaction = _interaction(done=True)

        await bot._on_app_command_error(interaction, RuntimeError("x"))

        interaction.followup.send.assert_awaited_once_with(
            DiscordUIMessages.PLAY_FAILED, ephemeral=True
        )

    async def test_unwraps_original_error(self, bot, caplog):
        """Should log the wrapped exception rather than the wrapper."""
        wrapper = MagicMock()
        wrapper.original = ValueError("the real problem")

        await bot._on_app_command_error(_interaction(done=False), wrapper)

        assert "the real problem" in caplog.text

    async def test_send_failure_is_swallowed(self, bot):
        interaction = _interaction(done=False)
        interaction.response.send_message.side_effect = discord.HTTPException(
            MagicMock(status=404, reason="x"), "Unknown interaction"
        )

        await bot._on_app_command_error(interaction, RuntimeError("x"))


# =============================================================================
# Ready / Close
# =============================================================================


class TestOnReady:
    async def test_sets_listening_presence(self, bot):
        user = MagicMock()
        user.id = 1
        with (
            patch.object(type(bot), "user", PropertyMock(return_value=user)),
            patch.object(bot, "change_presence", new_callable=AsyncMock) as presence,
        ):
            await bot.on_ready()

        activity = presence.await_args.kwargs["activity"]
        assert activity.type is discord.ActivityType.listening
        assert activity.name == "/play"


class TestBotClose:
    async def test_close_shuts_container_down_once(self, bot, mock_container):
        """Should tear down sessions once even if close is called twice."""
        with patch.object(commands.Bot, "close", new_callable=AsyncMock) as parent_close:
            await bot.close()
            await bot.close()

        mock_container.shutdown.assert_awaited_once()
        parent_close.assert_awaited_once()

    async def test_container_errors_do_not_block_close(self, bot, mock_container, caplog):
        mock_container.shutdown.side_effect = RuntimeError("boom")
        with patch.object(commands.Bot, "close", new_callable=AsyncMock) as parent_close:
            await bot.close()

        parent_close.assert_awaited_once()
        assert "Error during container shutdown" in caplog.text
