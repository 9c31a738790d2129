"""
Trading Signal Processing Module

This module contains the signal analysis components:
- SignalExtractor: Oracle-backed extraction of a signal candidate
- SignalValidator: Schema validation of candidates
- SignalNotifier: Report formatting
- SignalProcessor: Analysis orchestration
"""

from .signal_parser import SignalExtractor, find_first_json_object
from .signal_validator import SignalValidator, validate_signal
from .signal_notifier import SignalNotifier
from .signal_processor import SignalProcessor
from .signal_models import (
    TradingSignal, SignalValidationResult, SignalProcessingResult, SUPPORTED_SIDES
)

__all__ = [
    'SignalExtractor',
    'find_first_json_object',
    'SignalValidator',
    'validate_signal',
    'SignalNotifier',
    'SignalProcessor',
    'TradingSignal',
    'SignalValidationResult',
    'SignalProcessingResult',
    'SUPPORTED_SIDES'
]
