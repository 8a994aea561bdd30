"""Tests for the process entry point exit codes."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from notifier import main as main_module
from notifier.core.bot import ChatConnectionError


@pytest.fixture(autouse=True)
def quiet_startup(monkeypatch):
    monkeypatch.setattr(main_module, "load_dotenv", lambda: None)
    monkeypatch.setattr(main_module, "setup_logging", lambda *args, **kwargs: None)


@pytest.fixture
def valid_env(monkeypatch):
    monkeypatch.setenv("MONITORED_CHANNELS", "#ninja")
    monkeypatch.setenv("EVENT_NAME", "twitch_chat")
    monkeypatch.setenv("IFTTT_KEY", "abc123")


def _fake_bot(monkeypatch, start: AsyncMock) -> MagicMock:
    bot = MagicMock()
    bot.start = start
    monkeypatch.setattr(main_module, "ChatBot", MagicMock(return_value=bot))
    return bot


def test_config_error_exits_1(monkeypatch):
    start = AsyncMock(return_value=0)
    _fake_bot(monkeypatch, start)

    with pytest.raises(SystemExit) as exc:
        main_module.main()

    assert exc.value.code == 1
    start.assert_not_called()


def test_invalid_env_value_exits_1(monkeypatch, valid_env):
    monkeypatch.setenv("MAX_RECONNECT_ATTEMPTS", "many")

    with pytest.raises(SystemExit) as exc:
        main_module.main()

    assert exc.value.code == 1


def test_disconnect_exits_1(monkeypatch, valid_env):
    _fake_bot(monkeypatch, AsyncMock(return_value=1))

    with pytest.raises(SystemExit) as exc:
        main_module.main()

    assert exc.value.code == 1


def test_connection_failure_exits_1(monkeypatch, valid_env):
    _fake_bot(monkeypatch, AsyncMock(side_effect=ChatConnectionError("refused")))

    with pytest.raises(SystemExit) as exc:
        main_module.main()

    assert exc.value.code == 1


def test_keyboard_interrupt_exits_0(monkeypatch, valid_env):
    _fake_bot(monkeypatch, MagicMock())
    monkeypatch.setattr(main_module.asyncio, "run", MagicMock(side_effect=KeyboardInterrupt))

    with pytest.raises(SystemExit) as exc:
        main_module.main()

    assert exc.value.code == 0
