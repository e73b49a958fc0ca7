"""Tests for __main__.py CLI, signal handling and app wiring."""

import logging
import signal
from unittest.mock import MagicMock, patch

import pytest

from clipmon.__main__ import BANNER, install_signal_handlers, main, run_app
from clipmon.config import Configuration
from clipmon.monitor import ClipboardMonitor
from clipmon.storage import EntryStore


@pytest.fixture
def restore_signals():
    saved = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
    yield
    for sig, handler in saved.items():
        signal.signal(sig, handler)


@pytest.fixture
def app_env(tmp_path):
    """Patch run_app's collaborators so it runs against a temp database."""
    db_path = tmp_path / "db" / "database.sqlite"
    with (
        patch("clipmon.__main__.setup_logging"),
        patch("clipmon.__main__.create_sample_config") as mock_sample,
        patch(
            "clipmon.__main__.load_configuration",
            return_value=Configuration(database_path=str(db_path)),
        ) as mock_load,
        patch("clipmon.__main__.install_signal_handlers") as mock_signals,
        patch("clipmon.__main__.build_monitor") as mock_build,
    ):
        yield {
            "db_path": db_path,
            "sample": mock_sample,
            "load": mock_load,
            "signals": mock_signals,
            "build": mock_build,
        }


class TestInstallSignalHandlers:
    @pytest.mark.parametrize("sig", [signal.SIGINT, signal.SIGTERM])
    def test_handler_stops_monitor(self, restore_signals, sig, capsys, caplog):
        caplog.set_level(logging.INFO, logger="clipmon")
        monitor = MagicMock()
        install_signal_handlers(monitor)
        handler = signal.getsignal(sig)
        handler(sig, None)
        monitor.stop.assert_called_once()
        assert "shutting down gracefully" in caplog.text
        assert capsys.readouterr().out == ""

    def test_handler_ends_real_run_loop(self, restore_signals, storage, clipboard):
        monitor = ClipboardMonitor(storage, clipboard)
        install_signal_handlers(monitor)
        handler = signal.getsignal(signal.SIGTERM)
        ticks = []

        def check():
            ticks.append(1)
            handler(signal.SIGTERM, None)
            return False

        monitor.check_clipboard = check
        monitor.run(interval=0.001)
        assert ticks == [1]
        assert monitor.token.cancelled


class TestRunApp:
    def test_runs_monitor_and_exits_zero(self, app_env, capsys):
        assert run_app() == 0
        monitor = app_env["build"].return_value
        monitor.run.assert_called_once()
        app_env["signals"].assert_called_once_with(monitor)
        assert BANNER in capsys.readouterr().out
        assert app_env["db_path"].exists()

    def test_store_passed_to_monitor(self, app_env):
        run_app()
        (storage,), _kwargs = app_env["build"].call_args
        assert isinstance(storage, EntryStore)
        assert storage.db_path == str(app_env["db_path"])

    def test_default_config_writes_sample(self, app_env):
        run_app()
        app_env["sample"].assert_called_once_with()
        app_env["load"].assert_called_once_with(None)

    def test_custom_config_path(self, app_env):
        run_app("/tmp/custom.yaml")
        app_env["sample"].assert_not_called()
        app_env["load"].assert_called_once_with("/tmp/custom.yaml")

    def test_unopenable_store_keeps_monitoring(self, app_env, caplog, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file where a directory should be")
        app_env["load"].return_value = Configuration(database_path=str(blocker / "database.sqlite"))

        opened_at_build = []
        monitor = MagicMock()
        app_env["build"].side_effect = lambda storage: opened_at_build.append(storage.is_open) or monitor

        assert run_app() == 0
        assert opened_at_build == [False]
        monitor.run.assert_called_once()
        assert "Could not open clipboard database" in caplog.text

    def test_prints_stopped_after_run(self, app_env, capsys):
        run_app()
        assert capsys.readouterr().out.endswith("ClipMon stopped.\n")


class TestMain:
    @patch("clipmon.__main__.run_app", return_value=0)
    def test_no_args(self, mock_run):
        with patch("sys.argv", ["clipmon"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
            assert exc_info.value.code == 0
            mock_run.assert_called_once_with(None)

    @patch("clipmon.__main__.run_app", return_value=0)
    def test_config_option(self, mock_run):
        with patch("sys.argv", ["clipmon", "--config", "/etc/clipmon.yaml"]):
            with pytest.raises(SystemExit):
                main()
            mock_run.assert_called_once_with("/etc/clipmon.yaml")

    @patch("clipmon.__main__.run_app", return_value=0)
    def test_short_config_option(self, mock_run):
        with patch("sys.argv", ["clipmon", "-c", "/etc/clipmon.yaml"]):
            with pytest.raises(SystemExit):
                main()
            mock_run.assert_called_once_with("/etc/clipmon.yaml")

    @patch("clipmon.__main__.run_app", return_value=1)
    def test_failure_exit_code(self, _mock_run):
        with patch("sys.argv", ["clipmon"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
            assert exc_info.value.code == 1

    def test_version(self, capsys):
        with patch("sys.argv", ["clipmon", "--version"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
            assert exc_info.value.code == 0
        assert "ClipMon v" in capsys.readouterr().out

    def test_config_requires_path(self):
        with patch("sys.argv", ["clipmon", "--config"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
            assert exc_info.value.code == 2

    def test_unknown_option(self):
        with patch("sys.argv", ["clipmon", "--bogus"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
            assert exc_info.value.code == 2
