"""
PoaWeaver v0.1.0

Logging setup for applications embedding PoaWeaver.
"""

import logging
from pathlib import Path
from typing import Any, Dict


def setup_logging(config: Dict[str, Any]) -> logging.Logger:
    """
    Configure root logging from the ``logging`` section of a config dict.

    Args:
        config: Full configuration dictionary

    Returns:
        The package logger
    """
    settings = config.get('logging', {})
    log_level = getattr(logging, str(settings.get('level', 'INFO')).upper())

    handlers = [logging.StreamHandler()]
    log_file = settings.get('log_file')
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format=settings.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
        handlers=handlers,
        force=True,
    )
    logger = logging.getLogger('poaweaver')
    logger.setLevel(log_level)
    return logger
