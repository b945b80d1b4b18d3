"""
Unit tests for the application entry points.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from lanchat import main as main_module
from lanchat.errors.internal import ConfigError


class TestRun:
    """Synchronous entry point behaviour."""

    def test_health_check_flag_exits_with_result(self):
        with patch.object(main_module, "health_check", return_value=0) as mock_health:
            with pytest.raises(SystemExit) as exc:
                main_module.run(["--health-check"])
        assert exc.value.code == 0
        mock_health.assert_called_once()

    def test_keyboard_interrupt_exits_cleanly(self):
        def interrupt(coro):
            coro.close()
            raise KeyboardInterrupt

        with patch.object(main_module.asyncio, "run", side_effect=interrupt):
            with pytest.raises(SystemExit) as exc:
                main_module.run([])
        assert exc.value.code == 0

    def test_unexpected_error_exits_with_failure(self):
        def explode(coro):
            coro.close()
            raise RuntimeError("boom")

        with patch.object(main_module.asyncio, "run", side_effect=explode):
            with pytest.raises(SystemExit) as exc:
                main_module.run([])
        assert exc.value.code == 1


class TestHealthCheck:
    def test_passes_with_valid_config(self):
        assert main_module.health_check() == 0

    def test_fails_with_config_error(self):
        with patch.object(main_module, "load_config", side_effect=ConfigError("bad")):
            assert main_module.health_check() == 1


@pytest.mark.asyncio
class TestMain:
    async def test_main_runs_server_with_loaded_config(self):
        with patch.object(main_module, "run_server", new=AsyncMock()) as mock_run:
            with patch.object(main_module, "install_signal_handlers"):
                await main_module.main()
        mock_run.assert_awaited_once()
        config, stop = mock_run.await_args.args
        assert isinstance(stop, asyncio.Event)
        assert config.port >= 0

    async def test_main_exits_on_config_error(self):
        with patch.object(main_module, "load_config", side_effect=ConfigError("bad")):
            with pytest.raises(SystemExit) as exc:
                await main_module.main()
        assert exc.value.code == 1
