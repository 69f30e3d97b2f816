"""Tests for application startup."""

import os
from unittest.mock import patch

import pytest

from leaderboard import main as main_module
from leaderboard.main import create_app
from leaderboard.market.errors import ConfigurationError


class TestStartup:
    """A missing provider key must stop the process before it serves anything."""

    def test_create_app_requires_key(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError):
                create_app()

    def test_main_exits_without_key(self):
        with patch.dict(os.environ, {}, clear=True):
            with patch.object(main_module.uvicorn, "run") as run:
                with pytest.raises(SystemExit) as exc_info:
                    main_module.main()

        assert exc_info.value.code == 1
        run.assert_not_called()

    def test_main_runs_server_with_settings(self):
        env = {"ALPHA_VANTAGE_KEY": "test-key", "PORT": "9123"}
        with patch.dict(os.environ, env, clear=True):
            with patch.object(main_module.uvicorn, "run") as run:
                main_module.main()

        run.assert_called_once()
        assert run.call_args.kwargs["port"] == 9123
