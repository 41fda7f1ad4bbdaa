"""Core scheduling, configuration and logging for overlayqueue."""
