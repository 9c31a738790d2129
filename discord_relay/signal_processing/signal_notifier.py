from html import escape

from .signal_models import DEFAULT_STOP_LOSS_RATIO, TradingSignal


def format_number(value: float) -> str:
    """Render 5.0 as '5' and 2.5 as '2.5'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class SignalNotifier:
    """Handles formatting of trading signal analysis reports"""

    @staticmethod
    def format_entries(signal: TradingSignal) -> str:
        entries = ", ".join(format_number(entry) for entry in signal.entries)
        if len(signal.entries) > 1:
            return f"📈 <b>{escape(signal.side)}</b> at <b>{entries}</b> ({len(signal.entries)} entries)"
        return f"📈 <b>{escape(signal.side)}</b> at <b>{entries}</b>"

    @staticmethod
    def format_stop_loss(signal: TradingSignal) -> str:
        if signal.stop_loss:
            text = format_number(signal.stop_loss)
            if signal.stop_loss_condition:
                text += f" ({escape(str(signal.stop_loss_condition))})"
            return text
        fallback = signal.entries[0] * DEFAULT_STOP_LOSS_RATIO
        return f"${fallback:.2f} (default: 5% below entry)"

    @staticmethod
    def format(signal: TradingSignal) -> str:
        """Format a validated signal as a Telegram HTML report"""
        message = f"""
🤖 <b>AI Trading Signal Analysis</b>

📊 <b>{escape(signal.symbol)}</b>
{SignalNotifier.format_entries(signal)}
💰 Risk: <b>{format_number(signal.risk_percent)}%</b> of balance
📊 Risk per Entry: <b>{format_number(round(signal.risk_per_entry, 4))}%</b>
⚡ Leverage: <b>{format_number(signal.leverage)}x</b>
🛑 Stop Loss: {SignalNotifier.format_stop_loss(signal)}
🔥 Confidence: <b>{signal.confidence * 100:.1f}%</b>
💭 {escape(str(signal.reasoning))}

⚠️ <b>Note</b>: This is analysis only. No trades are executed.
        """

        return message.strip()
