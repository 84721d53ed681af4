"""
Logging Configuration for tincconf.

Provides centralized logging setup with a verbose toggle, per-feature
loggers and text or JSON log formatting. Library modules log through
``logging.getLogger(__name__)``; the command line front end calls
``setup_logging()`` once at startup.

Usage:
    from tincconf.logging_config import setup_logging, get_logger

    setup_logging(verbose=True)

    logger = get_logger('tincconf.config')
    logger.notice("Configuration loaded")
"""

import os
import sys
import json
import logging
import threading
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field


# =============================================================================
# LOGGING LEVELS AND FEATURES
# =============================================================================

class LogLevel(Enum):
    """Extended logging levels."""
    TRACE = 5
    DEBUG = 10
    VERBOSE = 15
    INFO = 20
    NOTICE = 25
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


class FeatureArea(Enum):
    """Feature areas for targeted logging."""
    CORE = auto()       # Process-level messages
    CONFIG = auto()     # Directive parsing and typed lookups
    KEYS = auto()       # Key file acquisition and rotation
    NET = auto()        # Address and subnet resolution
    CLI = auto()        # Command line front end


logging.addLevelName(LogLevel.TRACE.value, 'TRACE')
logging.addLevelName(LogLevel.VERBOSE.value, 'VERBOSE')
logging.addLevelName(LogLevel.NOTICE.value, 'NOTICE')


# =============================================================================
# CONFIGURATION STATE
# =============================================================================

@dataclass
class LoggingState:
    """Logging configuration state."""
    verbose: bool = False
    trace: bool = False
    log_file: Optional[str] = None
    console_enabled: bool = True
    json_format: bool = False
    initialized: bool = False
    _lock: threading.RLock = field(default_factory=threading.RLock)


_state = LoggingState()


# =============================================================================
# CUSTOM FORMATTER
# =============================================================================

class TincFormatter(logging.Formatter):
    """Formatter with colour support and structured output."""

    COLORS = {
        'TRACE': '\033[90m',      # Gray
        'DEBUG': '\033[36m',      # Cyan
        'VERBOSE': '\033[94m',    # Light blue
        'INFO': '\033[32m',       # Green
        'NOTICE': '\033[33m',     # Yellow
        'WARNING': '\033[33;1m',  # Bold yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[31;1m', # Bold red
        'RESET': '\033[0m',
    }

    def __init__(self, use_colors: bool = True, json_format: bool = False, stream=None):
        stream = stream if stream is not None else sys.stderr
        self.use_colors = use_colors and hasattr(stream, 'isatty') and stream.isatty()
        self.json_format = json_format
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        if self.json_format:
            return self._format_json(record)
        return self._format_text(record)

    def _format_text(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        level_name = record.levelname

        if self.use_colors:
            color = self.COLORS.get(level_name, '')
            reset = self.COLORS['RESET']
            level_str = f"{color}{level_name:8}{reset}"
        else:
            level_str = f"{level_name:8}"

        feature = self._extract_feature(record.name)
        feature_str = f"[{feature}]"

        msg = record.getMessage()

        extra_str = ""
        if hasattr(record, 'extra_data') and record.extra_data:
            extra_items = [f"{k}={v}" for k, v in record.extra_data.items()]
            extra_str = f" | {', '.join(extra_items)}"

        text = f"{timestamp} {level_str} {feature_str:10} {msg}{extra_str}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text

    def _format_json(self, record: logging.LogRecord) -> str:
        data = {
            'timestamp': datetime.now().isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'feature': self._extract_feature(record.name),
        }

        if hasattr(record, 'extra_data') and record.extra_data:
            data['extra'] = record.extra_data

        if record.exc_info:
            data['exception'] = self.formatException(record.exc_info)

        return json.dumps(data)

    def _extract_feature(self, logger_name: str) -> str:
        """Extract feature area from logger name."""
        parts = logger_name.split('.')
        if len(parts) >= 2:
            # tincconf.config.parser -> config
            return parts[1] if parts[0] == 'tincconf' else parts[0]
        return parts[0] if parts and parts[0] else 'core'


# =============================================================================
# CUSTOM LOGGER CLASS
# =============================================================================

class TincLogger(logging.Logger):
    """Logger with the extra levels and structured data helper."""

    def __init__(self, name: str, level: int = logging.NOTSET):
        super().__init__(name, level)
        self._feature: FeatureArea = self._detect_feature(name)

    def _detect_feature(self, name: str) -> FeatureArea:
        """Detect feature area from logger name."""
        feature_map = {
            'config': FeatureArea.CONFIG,
            'keys': FeatureArea.KEYS,
            'netutil': FeatureArea.NET,
            'cli': FeatureArea.CLI,
        }

        name_lower = name.lower()
        for key, feature in feature_map.items():
            if key in name_lower:
                return feature
        return FeatureArea.CORE

    @property
    def feature(self) -> FeatureArea:
        return self._feature

    def trace(self, msg: str, *args, **kwargs):
        """Log at TRACE level (ultra-verbose)."""
        if self.isEnabledFor(LogLevel.TRACE.value):
            self._log(LogLevel.TRACE.value, msg, args, **kwargs)

    def verbose(self, msg: str, *args, **kwargs):
        """Log at VERBOSE level."""
        if self.isEnabledFor(LogLevel.VERBOSE.value):
            self._log(LogLevel.VERBOSE.value, msg, args, **kwargs)

    def notice(self, msg: str, *args, **kwargs):
        """Log at NOTICE level."""
        if self.isEnabledFor(LogLevel.NOTICE.value):
            self._log(LogLevel.NOTICE.value, msg, args, **kwargs)

    def log_with_data(self, level: int, msg: str, data: Dict[str, Any], **kwargs):
        """Log with structured extra data."""
        extra = kwargs.get('extra', {})
        extra['extra_data'] = data
        kwargs['extra'] = extra
        if self.isEnabledFor(level):
            self._log(level, msg, (), **kwargs)


logging.setLoggerClass(TincLogger)


# =============================================================================
# SETUP AND CONFIGURATION
# =============================================================================

def _level_for(verbose: bool, trace: bool) -> int:
    if trace:
        return LogLevel.TRACE.value
    if verbose:
        return LogLevel.VERBOSE.value
    return logging.INFO


def setup_logging(
    verbose: bool = False,
    trace: bool = False,
    log_file: Optional[str] = None,
    console: bool = True,
    json_format: bool = False,
) -> None:
    """
    Initialize the logging system.

    Args:
        verbose: Enable verbose logging (VERBOSE level)
        trace: Enable trace logging (TRACE level, implies verbose)
        log_file: Optional file path for log output
        console: Enable console output on stderr
        json_format: Use JSON format for logs
    """
    with _state._lock:
        _state.verbose = verbose or trace
        _state.trace = trace
        _state.log_file = log_file
        _state.console_enabled = console
        _state.json_format = json_format

        base_level = _level_for(verbose, trace)

        root = logging.getLogger()
        root.setLevel(base_level)

        for handler in root.handlers[:]:
            root.removeHandler(handler)

        # stdout is reserved for prompts and command output
        if console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(base_level)
            console_handler.setFormatter(TincFormatter(
                use_colors=True,
                json_format=json_format,
                stream=sys.stderr,
            ))
            root.addHandler(console_handler)

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(base_level)
            file_handler.setFormatter(TincFormatter(
                use_colors=False,
                json_format=json_format,
            ))
            root.addHandler(file_handler)

        _state.initialized = True


def get_logger(name: str) -> TincLogger:
    """
    Get a feature-aware logger.

    Args:
        name: Logger name (e.g., 'tincconf.config.parser')

    Returns:
        TincLogger instance
    """
    logger = logging.getLogger(name)
    if not isinstance(logger, TincLogger):
        logging.setLoggerClass(TincLogger)
        logger = logging.getLogger(name)
    return logger


def is_verbose() -> bool:
    """Check if verbose mode is enabled."""
    return _state.verbose


# =============================================================================
# ENVIRONMENT VARIABLE CONFIGURATION
# =============================================================================

def _env_flag(name: str) -> bool:
    return os.environ.get(name, '').lower() in ('1', 'true', 'yes')


def configure_from_environment(
    verbose: bool = False,
    trace: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Configure logging from TINC_* environment variables.

    Explicit arguments win over the environment.
    """
    setup_logging(
        verbose=verbose or _env_flag('TINC_VERBOSE'),
        trace=trace or _env_flag('TINC_TRACE'),
        log_file=log_file or os.environ.get('TINC_LOG_FILE'),
        console=not _env_flag('TINC_LOG_NO_CONSOLE'),
        json_format=_env_flag('TINC_LOG_JSON'),
    )


__all__ = [
    'LogLevel',
    'FeatureArea',
    'setup_logging',
    'configure_from_environment',
    'get_logger',
    'is_verbose',
    'TincLogger',
    'TincFormatter',
]
