"""
Trading Signal Processor

This module orchestrates trading signal analysis, coordinating extraction,
validation and report formatting.
"""

import logging
import time

from .signal_models import SignalProcessingResult, TradingSignal
from .signal_notifier import SignalNotifier
from .signal_parser import SignalExtractor
from .signal_validator import SignalValidator

logger = logging.getLogger(__name__)


class SignalProcessor:
    """
    Orchestrates trading signal analysis.

    Responsibilities:
    - Extract a candidate from text through the oracle
    - Validate the candidate and build a TradingSignal
    - Format the analysis report
    - Hold the analysis on/off switch
    """

    def __init__(self, oracle, enabled: bool = True):
        self.signal_extractor = SignalExtractor(oracle)
        self.signal_validator = SignalValidator()
        self.notifier = SignalNotifier()
        self.enabled = enabled

    def enable(self) -> None:
        self.enabled = True
        logger.info("Trading analysis enabled")

    def disable(self) -> None:
        self.enabled = False
        logger.info("Trading analysis disabled")

    def is_active(self) -> bool:
        return self.enabled

    async def process_message(self, message_text: str) -> SignalProcessingResult:
        """
        Analyze a message for a trading signal.

        Args:
            message_text: Raw chat message

        Returns:
            SignalProcessingResult with the signal and its report on success
        """
        start_time = time.time()

        if not self.enabled:
            return SignalProcessingResult(
                success=False,
                error_message="Trading analysis is disabled",
                processing_time=time.time() - start_time
            )

        candidate = await self.signal_extractor.extract(message_text)
        if not candidate:
            logger.info("No trading signal detected in message")
            return SignalProcessingResult(
                success=False,
                error_message="No trading signal detected",
                processing_time=time.time() - start_time
            )

        validation = self.signal_validator.validate(candidate)
        if not validation.is_valid:
            return SignalProcessingResult(
                success=False,
                error_message=validation.error_message,
                processing_time=time.time() - start_time
            )

        signal = TradingSignal.from_dict(candidate)
        logger.info(f"Trading signal detected: {signal.symbol} {signal.side} {signal.entries}")

        return SignalProcessingResult(
            success=True,
            signal=signal,
            report=self.notifier.format(signal),
            processing_time=time.time() - start_time
        )
