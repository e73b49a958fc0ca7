import argparse
import logging
import signal
import sys

from clipmon import __version__
from clipmon.config import LOG_PATH, create_sample_config, load_configuration
from clipmon.storage import EntryStore, StorageError
from clipmon.utils import ensure_dirs

logger = logging.getLogger("clipmon")

BANNER = "ClipMon is monitoring clipboard changes. Press Ctrl+C to stop."


def setup_logging() -> None:
    ensure_dirs()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(LOG_PATH),
            logging.StreamHandler(sys.stderr),
        ],
    )


def install_signal_handlers(monitor) -> None:
    """Stop `monitor` on SIGINT or SIGTERM.

    The handler only cancels the monitor's token; the tick in progress
    finishes and the run loop returns at the next tick boundary.
    """

    def _handler(signum, _frame):
        name = signal.Signals(signum).name
        logger.info("Received %s, shutting down gracefully...", name)
        monitor.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _handler)


def build_monitor(storage):
    """Wire the macOS pasteboard, frontmost-app and language adapters into a monitor."""
    from clipmon.language import detect_dominant_language
    from clipmon.monitor import ClipboardMonitor
    from clipmon.pasteboard import Pasteboard, frontmost_app

    return ClipboardMonitor(
        storage,
        Pasteboard(),
        app_identity=frontmost_app,
        language_identifier=detect_dominant_language,
    )


def run_app(config_path: str | None = None) -> int:
    """Run the clipboard monitor in the foreground until signalled."""
    setup_logging()
    logger.info("ClipMon CLI starting...")

    if config_path is None:
        create_sample_config()
    config = load_configuration(config_path)

    storage = EntryStore(config.database_path, connect=False)
    try:
        storage.open()
    except StorageError:
        logger.exception("Could not open clipboard database, will retry on each capture")

    with storage:
        monitor = build_monitor(storage)
        install_signal_handlers(monitor)

        logger.info("ClipMon is now monitoring clipboard changes. Press Ctrl+C to stop.")
        print(BANNER)
        monitor.run()

    print("\nClipMon stopped.")
    return 0


def main():
    parser = argparse.ArgumentParser(
        prog="clipmon",
        description="ClipMon - Clipboard Monitor CLI Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
ClipMon monitors clipboard changes and stores all text entries
in a SQLite database. Configuration is read from ~/.clipmon/config.yaml

Examples:
  clipmon                                  # Start monitoring with default config
  clipmon --config /path/to/config.yaml    # Use custom config file
""",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"ClipMon v{__version__}",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="PATH",
        help="Specify custom config file path",
    )

    args = parser.parse_args()
    sys.exit(run_app(args.config))


if __name__ == "__main__":
    main()
