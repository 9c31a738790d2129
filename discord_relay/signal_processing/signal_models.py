"""
Trading Signal Data Models

This module contains data models for trading signals extracted from chat text.
"""

from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


@dataclass
class TradingSignal:
    """Advisory trading instruction extracted from a message. Never executed."""
    symbol: str
    side: str  # 'Buy' or 'Sell'
    entries: List[float]
    risk_percent: float
    leverage: float
    confidence: float
    reasoning: str = ""
    stop_loss: Optional[float] = None
    stop_loss_condition: Optional[str] = None  # e.g. "4H close below"
    take_profit: Optional[float] = None
    quantity: Optional[float] = None

    @property
    def risk_per_entry(self) -> float:
        return self.risk_percent / len(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase representation used in oracle replies."""
        return {
            'symbol': self.symbol,
            'side': self.side,
            'entries': self.entries,
            'riskPercent': self.risk_percent,
            'leverage': self.leverage,
            'stopLoss': self.stop_loss,
            'stopLossCondition': self.stop_loss_condition,
            'takeProfit': self.take_profit,
            'quantity': self.quantity,
            'confidence': self.confidence,
            'reasoning': self.reasoning
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TradingSignal':
        """Create from a validated oracle reply."""
        return cls(
            symbol=data['symbol'],
            side=data['side'],
            entries=list(data['entries']),
            risk_percent=data['riskPercent'],
            leverage=data['leverage'],
            confidence=data['confidence'],
            reasoning=str(data.get('reasoning') or ""),
            stop_loss=data.get('stopLoss'),
            stop_loss_condition=_optional_text(data.get('stopLossCondition')),
            take_profit=data.get('takeProfit'),
            quantity=data.get('quantity')
        )


@dataclass
class SignalValidationResult:
    """Data model for signal validation results."""
    is_valid: bool
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_valid': self.is_valid,
            'error_message': self.error_message
        }


@dataclass
class SignalProcessingResult:
    """Outcome of analyzing one message for a trading signal."""
    success: bool
    signal: Optional[TradingSignal] = None
    report: Optional[str] = None
    error_message: Optional[str] = None
    processing_time: Optional[float] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'signal': self.signal.to_dict() if self.signal else None,
            'report': self.report,
            'error_message': self.error_message,
            'processing_time': self.processing_time,
            'timestamp': self.timestamp.isoformat()
        }


SUPPORTED_SIDES = ['Buy', 'Sell']
MAX_RISK_PERCENT = 100
MAX_LEVERAGE = 100
DEFAULT_STOP_LOSS_RATIO = 0.95
