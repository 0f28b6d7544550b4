"""Allow running Gear as a module: python -m gear."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .app import GearApp

logger = logging.getLogger("gear")


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()
    logger.info("Gear ready!")

    app = QApplication(sys.argv)
    app.setApplicationName("Gear")
    app.setOrganizationName("Gear")
    app.setQuitOnLastWindowClosed(False)

    window = GearApp()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
