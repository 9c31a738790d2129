"""
Trading Signal Validator

Checks an oracle-produced candidate against the TradingSignal schema before
it is trusted. A candidate failing any rule is rejected whole.
"""

import logging
from typing import Any, Dict, Optional

from .signal_models import MAX_LEVERAGE, MAX_RISK_PERCENT, SUPPORTED_SIDES, SignalValidationResult

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class SignalValidator:
    """
    Validates trading signal candidates.

    Responsibilities:
    - Check required fields and their types
    - Check numeric ranges for risk, leverage, stop loss and confidence
    - Never coerce or fill in fields
    """

    def __init__(self):
        self.supported_sides = SUPPORTED_SIDES

    def _check(self, candidate: Dict[str, Any]) -> Optional[str]:
        symbol = candidate.get('symbol')
        if not isinstance(symbol, str) or not symbol.strip():
            return "Missing symbol"

        side = candidate.get('side')
        if side not in self.supported_sides:
            return f"Invalid side: {side}"

        entries = candidate.get('entries')
        if not isinstance(entries, list) or not entries:
            return "Entries must be a non-empty list"
        for entry in entries:
            if not _is_number(entry) or entry <= 0:
                return f"Invalid entry price: {entry}"

        risk = candidate.get('riskPercent')
        if not _is_number(risk) or not 0 < risk <= MAX_RISK_PERCENT:
            return f"Invalid risk percent: {risk}"

        leverage = candidate.get('leverage')
        if not _is_number(leverage) or not 0 < leverage <= MAX_LEVERAGE:
            return f"Invalid leverage: {leverage}"

        stop_loss = candidate.get('stopLoss')
        if not _is_number(stop_loss) or stop_loss <= 0:
            return f"Invalid stop loss: {stop_loss}"

        confidence = candidate.get('confidence')
        if not _is_number(confidence) or not 0 <= confidence <= 1:
            return f"Invalid confidence: {confidence}"

        return None

    def validate(self, candidate: Any) -> SignalValidationResult:
        """
        Validate a parsed signal candidate.

        Args:
            candidate: Parsed oracle reply

        Returns:
            SignalValidationResult with the first failing rule, if any
        """
        if not isinstance(candidate, dict) or not candidate:
            return SignalValidationResult(is_valid=False, error_message="Signal candidate is empty")

        error_message = self._check(candidate)
        if error_message:
            logger.warning(f"Rejected signal candidate: {error_message}")
            return SignalValidationResult(is_valid=False, error_message=error_message)

        return SignalValidationResult(is_valid=True)


def validate_signal(candidate: Any) -> bool:
    return SignalValidator().validate(candidate).is_valid
