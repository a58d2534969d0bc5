"""Tests for the command line entry point."""

from datetime import datetime, timezone

import pytest

from gw_dailies import __main__ as cli
from gw_dailies.config.loader import ConfigError


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Leave the global structlog configuration untouched."""
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Test default flags."""
        args = cli.parse_args([])
        assert args.output_format == "discord"
        assert args.loop is False
        assert args.now is False
        assert args.at_time is None

    def test_all_flags(self):
        """Test every flag is accepted."""
        args = cli.parse_args([
            "--loop", "--now", "--discord-channel-id", "42",
            "--output-format", "html", "--log-level", "DEBUG",
        ])
        assert args.loop and args.now
        assert args.discord_channel_id == 42
        assert args.output_format == "html"

    def test_unknown_format_rejected(self):
        """Test argparse refuses unsupported formats."""
        with pytest.raises(SystemExit):
            cli.parse_args(["--output-format", "pdf"])


class TestParseAtTime:
    """Tests for parse_at_time function."""

    def test_valid(self):
        """Test value is read as UTC."""
        assert cli.parse_at_time("2025-11-25T17:00:00") == datetime(
            2025, 11, 25, 17, 0, tzinfo=timezone.utc
        )

    def test_none(self):
        """Test absent value."""
        assert cli.parse_at_time(None) is None

    @pytest.mark.parametrize("value", ["2025-11-25 17:00:00", "25/11/2025", "2025-11-25T25:00:00"])
    def test_invalid(self, value):
        """Test malformed values are configuration errors."""
        with pytest.raises(ConfigError, match="YYYY-MM-DDTHH:MM:SS"):
            cli.parse_at_time(value)


class TestValidateArgs:
    """Tests for validate_args function."""

    def test_at_time_with_discord(self):
        """Test simulated time cannot post to Discord."""
        args = cli.parse_args(["--at-time", "2025-11-25T17:00:00"])
        with pytest.raises(ConfigError, match="not supported with Discord"):
            cli.validate_args(args)

    def test_at_time_with_text(self):
        """Test simulated time with a text format."""
        args = cli.parse_args(["--output-format", "txt", "--at-time", "2025-11-25T17:00:00"])
        assert cli.validate_args(args).day == 25


class TestMain:
    """Tests for main exit codes."""

    def test_version(self, capsys):
        """Test --version prints and exits 0."""
        with pytest.raises(SystemExit) as exc:
            cli.main(["--version"])
        assert exc.value.code == 0
        assert "gw-dailies" in capsys.readouterr().out

    def test_missing_token(self, monkeypatch):
        """Test discord output without TOKEN exits 2."""
        monkeypatch.delenv("TOKEN", raising=False)
        with pytest.raises(SystemExit) as exc:
            cli.main(["--now"])
        assert exc.value.code == 2

    def test_bad_at_time(self):
        """Test malformed --at-time exits 2."""
        with pytest.raises(SystemExit) as exc:
            cli.main(["--output-format", "txt", "--at-time", "yesterday"])
        assert exc.value.code == 2

    def test_at_time_with_discord(self):
        """Test --at-time with discord output exits 2."""
        with pytest.raises(SystemExit) as exc:
            cli.main(["--at-time", "2025-11-25T17:00:00"])
        assert exc.value.code == 2
