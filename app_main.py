"""Application entry point for the ExamQt console."""

from __future__ import annotations

import socket
import sys

from PySide6.QtWidgets import QApplication

from exam_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from exam_app.constants.storage_constants import RESULTS_FILE_PATH
from exam_app.core.exam_manager import ExamManager
from exam_app.core.services.result_store import ResultStore
from exam_app.core.services.session_ticker import SessionTicker
from exam_app.server.api_server import start_api_server
from exam_app.ui.main_window import ExamMainWindow
from exam_app.utils.logging_config import configure_logging


def _determine_api_url(port: int) -> str:
    """Best-effort determination of the local IP for the HTTP API."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Initialize logging, start the API server and clock, and launch the Qt UI."""
    logger = configure_logging()
    logger.info("Starting ExamQt…")

    exam_manager = ExamManager(result_store=ResultStore(RESULTS_FILE_PATH))
    start_api_server(exam_manager=exam_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    ticker = SessionTicker(exam_manager.tick_sessions)
    ticker.start()
    logger.info("Quiz API available at %s", _determine_api_url(DEFAULT_PORT))

    app = QApplication(sys.argv)
    window = ExamMainWindow(exam_manager=exam_manager)
    window.show()
    exit_code = app.exec()
    ticker.stop(timeout=2.0)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
