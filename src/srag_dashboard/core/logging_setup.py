import logging
import logging.handlers
from pathlib import Path
from srag_dashboard.core import config

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
DATE_FMT = "%Y-%m-%d %H:%M:%S"

# chatty at INFO while a yearly extract streams in
QUIET_LOGGERS = ("urllib3", "requests")

def setup_logging(level: str | None = None, file_name: str | None = None) -> Path | None:
    """
    Console plus rotating file logging for seed runs. Level and file name
    default to LOG_LEVEL / LOG_FILE. Returns the log file path, or None when
    logging was already configured.
    """
    if getattr(setup_logging, "_configured", False):
        return None

    logs_dir = Path(config.LOGS_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / (file_name or config.LOG_FILE)

    root = logging.getLogger()
    root.setLevel((level or config.LOG_LEVEL).upper())
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FMT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    seed_file = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=5_000_000, backupCount=5, encoding="utf-8"
    )
    seed_file.setFormatter(formatter)
    root.addHandler(seed_file)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    setup_logging._configured = True
    return log_path
