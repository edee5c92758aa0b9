"""Combined logger with all functionality."""

import logging

from treegeodesic.logger.table_logger import TableLogger


class Logger(TableLogger):
    """
    Logger used for the geodesic search trace.

    Usage:
        logger = Logger("my_algorithm")
        logger.setup_console_logging()
        logger.section("Phase 1")
        logger.info("Starting phase 1...")
        logger.table(data, headers=["col1", "col2"])
    """

    def setup_console_logging(self, level: int = logging.INFO):
        """Enable logging to the console."""
        self.disabled = False
        if not any(isinstance(h, logging.StreamHandler) for h in self.logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
            self.logger.addHandler(handler)
        self.logger.setLevel(level)
