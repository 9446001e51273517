"""
cmdtree Logging Configuration

All framework modules log under the ``cmdtree`` logger namespace, which is
silent until a handler is installed. ``CLI.run`` shows warnings and errors
on stderr and ``--debug`` lowers the threshold to DEBUG.
"""

import logging

# Parent logger for every cmdtree module logger
_logger = logging.getLogger("cmdtree")
_logger.addHandler(logging.NullHandler())  # Default: no output

_DEFAULT_FORMAT = "[%(levelname)s] %(message)s"


def enable_verbose(level: str = "INFO", format: str = None) -> None:
    """Enable log output on stderr.

    Args:
        level: Logging level - "DEBUG", "INFO", "WARNING", "ERROR"
        format: Optional custom format string

    Example:
        enable_verbose("DEBUG")
        registry = discover_commands(["./commands"])  # Logs each file found
        disable_verbose()
    """
    _logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level.upper()))

    if format is None:
        format = _DEFAULT_FORMAT

    handler.setFormatter(logging.Formatter(format))
    _logger.addHandler(handler)


def disable_verbose() -> None:
    """Disable log output."""
    _logger.setLevel(logging.WARNING)
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)


def set_debug_mode(enabled: bool) -> None:
    """Switch between debug logging and the quiet default."""
    if enabled:
        enable_verbose("DEBUG")
        _logger.debug("Debug mode enabled via --debug flag")
    else:
        disable_verbose()


def is_debug_mode() -> bool:
    """Return True when debug logging is active."""
    return _logger.isEnabledFor(logging.DEBUG)
