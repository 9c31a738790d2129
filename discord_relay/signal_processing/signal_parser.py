import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SIGNAL_PROMPT_TEMPLATE = """
You are a professional trading signal analyzer specialized in parsing specific signal formats. Analyze this message and extract trading information.

MESSAGE FORMAT EXAMPLES:
- "BTC\\nEntries 119000-119500\\nRisk 5%\\nLeverage 10x\\nSL: 4H close below 115000"
- "AAVE.P\\nEntries 286.72-281.53\\nRisk 5%\\nLeverage 20x\\nSL: 4H close below 275.44"
- "ETH\\nEntries 3200-3250\\nRisk 5%\\nLeverage 50x\\nSL: 4H close below 3100"
- "SOL\\nEntries 150\\nRisk 5%\\nLeverage 10x\\n(No SL - will use default 5% below entry)"

PARSING RULES:
1. Symbol: Extract the trading pair (e.g., "BTC", "AAVE.P")
2. Side: Determine if it's Buy or Sell based on entry prices and context
3. Entries: Parse entry prices separated by "-" or "/" - all entries are limit orders
4. Risk: Extract the EXACT risk percentage from the message (e.g., "Risk 5%" = 5.0) - this is the amount risked as a percentage of current balance
5. Leverage: Extract the leverage multiplier (e.g., "10x", "20x", "50x" = 10, 20, 50) - if not specified, use 10 as default
6. Stop Loss: Extract the stop loss price and condition (e.g., "4H close below 275.44")

IMPORTANT:
- The trading side (Buy/Sell) should be determined by the strategy context, not just the signal format.
- ALWAYS extract the EXACT risk percentage mentioned in the message, never substitute a default.
- If the message says "Risk 7%", return 7.0. If it says "Risk 1.5%", return 1.5.

RESPONSE FORMAT (JSON only):
{{
   "symbol": "BTCUSDT",
   "side": "Buy",
   "entries": [119000, 119500],
   "riskPercent": 5.0,
   "leverage": 10,
   "stopLoss": 115000,
   "stopLossCondition": "4H close below",
   "confidence": 0.95,
   "reasoning": "Clear signal with multiple entries and defined risk management"
}}

MESSAGE TO ANALYZE:
{message}

Parse this message and return ONLY the JSON response.
"""


def find_first_json_object(text: str) -> Optional[str]:
    """
    Locate the first balanced {...} block in text.

    Braces inside JSON strings are ignored.

    Returns:
        The block, or None if there is no balanced block
    """
    if not text:
        return None

    start = text.find('{')
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def build_signal_prompt(message: str) -> str:
    return SIGNAL_PROMPT_TEMPLATE.format(message=message)


class SignalExtractor:
    """Asks the oracle to turn free text into a signal candidate dictionary."""

    def __init__(self, oracle):
        """
        Args:
            oracle: Object with an async complete(prompt) method returning the raw reply
        """
        self.oracle = oracle

    async def extract(self, message: str) -> Optional[Dict[str, Any]]:
        """
        Extract a signal candidate from a message. The oracle is called once.

        Returns:
            The parsed JSON object, or None when the reply holds no usable JSON
        """
        if not message or not message.strip():
            return None

        try:
            reply = await self.oracle.complete(build_signal_prompt(message))
        except Exception as e:
            logger.error(f"Error calling oracle for signal extraction: {e}")
            return None

        block = find_first_json_object(reply or "")
        if not block:
            logger.warning(f"No JSON found in oracle reply: {reply}")
            return None

        try:
            parsed = json.loads(block)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse oracle JSON: {e}")
            return None

        if not isinstance(parsed, dict):
            return None

        logger.info(f"Oracle parsed data: {parsed}")
        return parsed
