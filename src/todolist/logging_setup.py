from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Attribute set on handlers installed here so repeated calls replace them.
_MARKER = "_todolist_handler"


# PUBLIC_INTERFACE
def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure the 'todolist' logger with:
    - stderr handler at `level`
    - optional file handler at DEBUG when `log_file` is given

    Safe to call more than once; earlier handlers from this function are removed.
    """
    logger = logging.getLogger("todolist")
    logger.setLevel(logging.DEBUG if log_file else level)

    for h in list(logger.handlers):
        if getattr(h, _MARKER, False):
            logger.removeHandler(h)
            h.close()

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    setattr(ch, _MARKER, True)
    logger.addHandler(ch)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        setattr(fh, _MARKER, True)
        logger.addHandler(fh)
