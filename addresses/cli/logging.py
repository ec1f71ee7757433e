"""
Logging configuration for the addresses CLI.
Provides consistent logging setup across all commands.
"""

import logging
import sys

class DebugFormatter(logging.Formatter):
    """Formatter prefixing each line with its timestamp and logger name."""
    
    def format(self, record: logging.LogRecord) -> str:
        message = f"[{record.created:.3f}] {record.levelname} {record.name}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        # Colour only when writing to a terminal
        if sys.stderr.isatty():
            cyan = '\033[0;36m'
            reset = '\033[0m'
            return f"{cyan}{message}{reset}"
        return message

def setup_logging(debug: bool = False, level: str = 'INFO') -> None:
    """Setup logging configuration.
    
    Args:
        debug: Enable debug logging, overriding ``level``
        level: Log level name used when not debugging
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO))
    
    root_logger.handlers.clear()
    
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(DebugFormatter())
    root_logger.addHandler(console_handler)
    
    # Always keep SQLAlchemy logging at WARNING level
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.pool').setLevel(logging.WARNING)

def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name.
    
    Args:
        name: Logger name (typically __name__)
        
    Returns:
        logging.Logger: Configured logger instance
    """
    return logging.getLogger(name)
