"""
Notifier Configuration

Exports the environment-driven static configuration.
"""

from notifier.config.config import Config, Environment

__all__ = ["Config", "Environment"]
