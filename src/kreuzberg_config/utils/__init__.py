"""Utility modules for the configuration layer."""

from .logging_utils import get_logger, log_operation, setup_logging

__all__ = ['get_logger', 'log_operation', 'setup_logging']
