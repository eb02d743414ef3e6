"""Tests for the server entry point."""

from unittest.mock import patch

import run_api


class TestMain:
    @patch("run_api.uvicorn.run")
    def test_defaults_come_from_settings(self, mock_run):
        run_api.main([])

        args, kwargs = mock_run.call_args
        assert args == ("api.app:create_app",)
        assert kwargs["factory"] is True
        settings = run_api.get_settings()
        assert kwargs["host"] == settings.host
        assert kwargs["port"] == settings.port
        assert kwargs["log_level"] == settings.log_level.lower()

    @patch("run_api.uvicorn.run")
    def test_flags_override_settings(self, mock_run):
        run_api.main(["--port", "9001", "--host", "127.0.0.1", "--log-level", "debug", "--reload"])

        kwargs = mock_run.call_args.kwargs
        assert kwargs["port"] == 9001
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["log_level"] == "debug"
        assert kwargs["reload"] is True
