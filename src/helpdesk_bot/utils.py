"""Shared utility functions for the help desk bot."""

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.
    
    Args:
        name: Logger name (typically __name__)
        
    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
