import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(name: str, level: int | str = logging.INFO) -> logging.Logger:
    formatter = logging.Formatter(LOG_FORMAT)

    # Handlers live on the root logger so uvicorn and app loggers share them.
    root = logging.getLogger()
    if not root.handlers:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)

    root.setLevel(level)

    return logging.getLogger(name)
