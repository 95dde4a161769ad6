import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from journalfeed.config import Config, LoggingConfig

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(cfg: Optional[LoggingConfig] = None, log_to_file: bool = True) -> None:
    """
    Configure root logging once: stdout + rotating file.

    Safe to call repeatedly (handlers are replaced, not stacked).
    """
    cfg = cfg or Config.logging
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    # ---- Console ----
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    # ---- File (rotating) ----
    if log_to_file:
        log_dir = Path(cfg.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / cfg.log_file,
            maxBytes=cfg.max_bytes,
            backupCount=cfg.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, cfg.level.upper(), logging.INFO),
        handlers=handlers,
        force=True,
    )
