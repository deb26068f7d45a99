from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication

from .config import AppConfig
from .ui import MainWindow


def main() -> None:
    app = QApplication(sys.argv)
    app.setApplicationName("Freewrite")
    config = AppConfig()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    window = MainWindow(config)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
