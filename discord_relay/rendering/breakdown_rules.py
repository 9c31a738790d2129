"""
Breakdown Rules

Ordered regex -> phrase table used to explain trade status lines such as
"BTC stopped BE" or "Second entries not valid". Every matching rule
contributes its phrase, in table order.
"""

import re
from typing import List, Pattern, Tuple

SECOND_ENTRIES_RULE = "second_entries_invalid"

SECOND_ENTRIES_NOTE = (
    "⚠️ Note: second entries are not valid any more. "
    "Do not place new orders at the second entry levels."
)

# (rule name, pattern, phrase)
BREAKDOWN_RULES: List[Tuple[str, Pattern, str]] = [
    ('invalid_short', re.compile(r'\binvalid\b.*\b(short|sell)\b|\b(short|sell)\b.*\binvalid', re.IGNORECASE),
     "Invalid short/sell setup, do not enter"),
    ('invalid_long', re.compile(r'\binvalid\b.*\b(long|buy)\b|\b(long|buy)\b.*\binvalid', re.IGNORECASE),
     "Invalid long/buy setup, do not enter"),
    ('breakeven', re.compile(r'\b(stopped|stops?|sl)\s+(moved\s+)?((at|to|@)\s*)?be\b(?!\s+\w)|\bbreak\s*-?\s*even\b', re.IGNORECASE),
     "Stop moved to breakeven (no loss on the trade)"),
    ('stopped_out', re.compile(r'\bstopped\s+out\b|\bsl\s+hit\b|\bstop\s*loss\s+hit\b', re.IGNORECASE),
     "Stopped out, position closed at the stop loss"),
    (SECOND_ENTRIES_RULE, re.compile(r'\b(second|2nd)\s+entr(y|ies)\b.*\b(not|no\s+longer|in)\s*valid', re.IGNORECASE),
     "Second entries not valid"),
    ('not_active', re.compile(r'\bnot\s+(yet\s+)?active\b|\binactive\b', re.IGNORECASE),
     "Trade not active yet"),
    ('trade_active', re.compile(r'\b(trade|position)\s+(is\s+)?(active|open|running)\b|(?<!not\s)(?<!yet\s)\bactive\b', re.IGNORECASE),
     "Trade active"),
    ('limit_filled', re.compile(r'\b(limit\s+order|entry|entries)\s+(got\s+)?filled\b|(?<!not\s)\bfilled\b', re.IGNORECASE),
     "Limit order filled, position is open"),
    ('order_cancelled', re.compile(r'\bcancel+ed\b|\bcancel\b', re.IGNORECASE),
     "Order cancelled"),
    ('tp1', re.compile(r'\btp\s*1\b|\btarget\s*1\b', re.IGNORECASE),
     "First target (TP1) hit"),
    ('tp2', re.compile(r'\btp\s*2\b|\btarget\s*2\b', re.IGNORECASE),
     "Second target (TP2) hit"),
    ('closed_profit', re.compile(r'\bclosed\s+(in\s+)?profits?\b|\btook\s+profits?\b', re.IGNORECASE),
     "Closed in profit"),
    ('closed_loss', re.compile(r'\bclosed\s+(in\s+)?(a\s+)?(slight\s+)?loss\b', re.IGNORECASE),
     "Closed at a loss"),
    ('partials', re.compile(r'\bpartials?\b', re.IGNORECASE),
     "Partial profits taken"),
    ('not_triggered', re.compile(r'\bnot\s+(triggered|filled)\b|\bdidn\'?t\s+(trigger|fill)\b', re.IGNORECASE),
     "Entry not triggered yet"),
]

RECAP_HEADER_PATTERN = re.compile(
    r'^\W*(daily\s+|weekly\s+|trade\s+|trades\s+|signal\s+)?(recap|update|updates|summary)\b',
    re.IGNORECASE
)

SYMBOL_PATTERN = re.compile(r'^([A-Za-z0-9]{2,15}(?:\.[A-Za-z]{1,3})?)(?=\W|$)(.*)$')

# Uppercase tokens that open status lines rather than name a ticker
NON_SYMBOL_TOKENS = {'TP', 'TP1', 'TP2', 'TP3', 'SL', 'BE', 'DCA', 'RR', 'PNL', 'LONG', 'SHORT', 'BUY', 'SELL'}
