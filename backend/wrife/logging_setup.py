import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = '%(asctime)s:%(levelname)s:%(name)s: %(message)s'


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
	log_formatter = logging.Formatter(LOG_FORMAT)
	numeric_level = getattr(logging, str(level).upper(), logging.INFO)

	root_logger = logging.getLogger()
	root_logger.setLevel(numeric_level)

	# Avoid stacking handlers when the app is re-created (tests, reloads)
	if getattr(root_logger, "_wrife_configured", False):
		return

	stream_handler = logging.StreamHandler()
	stream_handler.setFormatter(log_formatter)
	stream_handler.setLevel(numeric_level)
	root_logger.addHandler(stream_handler)

	if log_file:
		file_handler = RotatingFileHandler(log_file, maxBytes=5*1024*1024, backupCount=2)
		file_handler.setFormatter(log_formatter)
		file_handler.setLevel(numeric_level)
		root_logger.addHandler(file_handler)

	# httpx logs every request at INFO; keep LLM calls quiet unless debugging
	logging.getLogger("httpx").setLevel(logging.WARNING)
	root_logger._wrife_configured = True  # type: ignore[attr-defined]
