#!/usr/bin/env python3
"""
MinTrans - Selection Translator
Select text, point at the icon, read the translation in a floating panel
"""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from mintrans.config import AppConfig, ConfigStore
from mintrans.logging_config import setup_logger
from mintrans.main_window import ReaderWindow


def main():
    """Main application entry point"""
    app = QApplication(sys.argv)

    store = ConfigStore()
    config = AppConfig.from_store(store)
    logger = setup_logger(level=logging.DEBUG if config.debug_mode else logging.INFO)
    logger.info("Starting selection translator (provider: %s)", config.selected_ai or "not configured")

    window = ReaderWindow(store)
    if len(sys.argv) > 1:
        window.open_file(sys.argv[1])
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
