"""Process-wide logging setup.

Modules log through `logging.getLogger(__name__)`; this module only decides
where records go. Console output is always enabled. A size-rotating file
handler is added when `LOG_FILE` is set.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")
LOG_FILE_MAX_BYTES = int(os.getenv("LOG_FILE_MAX_BYTES", str(10 * 1024 * 1024)))
LOG_FILE_BACKUP_COUNT = int(os.getenv("LOG_FILE_BACKUP_COUNT", "5"))


def configure_logging(level: str | None = None, log_file: str | None = None) -> logging.Logger:
    """Install console and optional rotating-file handlers on the root logger.

    Calling this more than once replaces previously installed handlers.

    Args:
        level: Log level name; defaults to `LOG_LEVEL`.
        log_file: File path for rotating logs; defaults to `LOG_FILE`.

    Returns:
        The configured root logger.
    """
    root = logging.getLogger()
    root.setLevel((level or LOG_LEVEL).upper())

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    path = log_file or LOG_FILE
    if path:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # urllib3 is noisy at INFO during polling.
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return root
