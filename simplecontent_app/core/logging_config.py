"""
Centralized Logging Configuration for the SimpleContent host

Levels come from the ``Logging`` configuration section:

    "Logging": {
        "LogLevel": {"Default": "Debug", "werkzeug": "Warning"},
        "File": {"Path": "logs/simplecontent.log"}
    }

``Default`` applies to the app logger and the ``simplecontent_app`` package
logger; any other key names a logger directly.
"""

import logging
import logging.handlers
import os
from typing import Optional

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
PACKAGE_LOGGER = 'simplecontent_app'


def _level(name: Optional[str], fallback: int = logging.INFO) -> int:
    if not name:
        return fallback
    # "Information"/"Trace"/"Critical" style names map onto stdlib levels
    aliases = {'INFORMATION': 'INFO', 'TRACE': 'DEBUG', 'NONE': 'CRITICAL'}
    upper = name.strip().upper()
    return getattr(logging, aliases.get(upper, upper), fallback)


def setup_logging(
    app=None,
    section=None,
    content_root: Optional[str] = None,
) -> logging.Logger:
    """
    Configure application logging.

    Args:
        app: Flask application instance (optional)
        section: ``Logging`` configuration section (optional)
        content_root: Base for a relative log file path

    Returns:
        Configured package logger
    """
    level_section = section.get_section('LogLevel') if section is not None else None
    default_level = _level(level_section.get('Default') if level_section is not None else None)

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(default_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_file = section.get('File:Path') if section is not None else None
    if log_file:
        if content_root and not os.path.isabs(log_file):
            log_file = os.path.join(content_root, log_file)
        os.makedirs(os.path.dirname(log_file) or '.', exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if app is not None:
        app.logger.setLevel(default_level)
        if not app.logger.handlers:
            app.logger.addHandler(console_handler)
        app.logger.propagate = False

    if level_section is not None:
        for child in level_section.get_children():
            if child.key.lower() == 'default':
                continue
            logging.getLogger(child.key).setLevel(_level(child.value))

    logger.info(f"Logging initialized: level={logging.getLevelName(default_level)}, file={log_file or '-'}")

    return logger
