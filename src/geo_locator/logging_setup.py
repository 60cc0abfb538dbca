import logging
from typing import Optional

from .settings import LoggingSettings, settings


def setup_logging(cfg: Optional[LoggingSettings] = None) -> logging.Logger:
    """
    Sets up root logging based on the provided configuration.
    """
    cfg = cfg or settings.logging

    logging.basicConfig(level=cfg.level, format=cfg.format)

    if cfg.file:
        file_handler = logging.FileHandler(cfg.file)
        file_handler.setFormatter(logging.Formatter(cfg.format))
        logging.getLogger().addHandler(file_handler)

    return logging.getLogger("geo_locator")
