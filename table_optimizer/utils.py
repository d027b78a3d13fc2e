"""
Utility functions for the table optimizer.
"""

import logging


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Setup logger with consistent formatting.
    
    Args:
        name: Logger name
        level: Logging level
        
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    
    return logger


def set_log_level(level: int):
    """Apply a logging level to every table_optimizer logger."""
    root = logging.getLogger("table_optimizer")
    root.setLevel(level)
    for name, logger in logging.root.manager.loggerDict.items():
        if name.startswith("table_optimizer") and isinstance(logger, logging.Logger):
            logger.setLevel(level)
