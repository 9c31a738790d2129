"""
Annotation Augmenter

Appends explanatory sections to rendered message text: a rule-based
breakdown of trade status lines and an AI summary. Both are best-effort.
"""

import logging
from typing import List, Optional

from discord_relay.rendering.breakdown_rules import (
    BREAKDOWN_RULES, NON_SYMBOL_TOKENS, RECAP_HEADER_PATTERN, SECOND_ENTRIES_NOTE,
    SECOND_ENTRIES_RULE, SYMBOL_PATTERN
)

logger = logging.getLogger(__name__)

BREAKDOWN_HEADER = "📊 Breakdown:"
SUMMARY_HEADER = "🤖 AI Summary:"


def _split_symbol(line: str):
    """Return (symbol, rest) when the line opens with a ticker-like token."""
    match = SYMBOL_PATTERN.match(line)
    if not match:
        return None, line

    token = match.group(1)
    if token != token.upper() or not any(c.isalpha() for c in token):
        return None, line
    if token.upper() in NON_SYMBOL_TOKENS:
        return None, line

    return token, match.group(2).strip(" |:-\t")


def _explain_line(line: str, symbol: Optional[str]):
    """Explain one status line. Returns (text, matched rule names)."""
    phrases = []
    matched = []
    for rule_name, pattern, phrase in BREAKDOWN_RULES:
        if pattern.search(line):
            phrases.append(phrase)
            matched.append(rule_name)

    prefix = f"{symbol}: " if symbol else "• "
    if phrases:
        return prefix + "; ".join(phrases), matched
    return f"{prefix}Status update: {line}", matched


def build_breakdown(raw_text: str) -> Optional[str]:
    """
    Explain a trade recap line by line.

    A line holding only a ticker (e.g. "BTC") sets the symbol for the status
    lines that follow it. A leading recap header line is skipped.

    Returns:
        The breakdown text, or None when the message has no content lines
    """
    lines = [line.strip() for line in (raw_text or "").splitlines()]
    lines = [line for line in lines if line]
    if lines and RECAP_HEADER_PATTERN.match(lines[0]):
        lines = lines[1:]
    if not lines:
        return None

    output: List[str] = []
    current_symbol: Optional[str] = None
    pending_symbol_line: Optional[str] = None
    second_entries_seen = False

    for line in lines:
        symbol, rest = _split_symbol(line)

        if symbol and not rest:
            # A bare ticker with nothing under it still gets reported
            if pending_symbol_line:
                output.append(_explain_line(pending_symbol_line, pending_symbol_line)[0])
            current_symbol = symbol
            pending_symbol_line = line
            continue

        pending_symbol_line = None
        if symbol:
            current_symbol = symbol

        explanation, matched = _explain_line(line, current_symbol)
        output.append(explanation)
        if SECOND_ENTRIES_RULE in matched:
            second_entries_seen = True

    if pending_symbol_line:
        output.append(_explain_line(pending_symbol_line, pending_symbol_line)[0])

    if second_entries_seen:
        output.append(SECOND_ENTRIES_NOTE)

    return "\n".join(output)


class AnnotationAugmenter:
    """Adds the breakdown and AI summary sections to rendered content."""

    def __init__(self, oracle=None, enable_breakdown: bool = True):
        """
        Args:
            oracle: Object with an async summarize(text) method, or None to skip summaries
            enable_breakdown: Whether to add the rule-based breakdown section
        """
        self.oracle = oracle
        self.enable_breakdown = enable_breakdown

    async def summarize(self, raw_text: str) -> Optional[str]:
        if not self.oracle or not raw_text or not raw_text.strip():
            return None
        try:
            summary = await self.oracle.summarize(raw_text)
        except Exception as e:
            logger.warning(f"AI summary failed, continuing without it: {e}")
            return None
        if not summary or not summary.strip():
            return None
        return summary.strip()

    async def augment(self, content: str, raw_text: str) -> str:
        sections = []

        if self.enable_breakdown:
            try:
                breakdown = build_breakdown(raw_text)
            except Exception as e:
                logger.warning(f"Breakdown failed, continuing without it: {e}")
                breakdown = None
            if breakdown:
                sections.append(f"{BREAKDOWN_HEADER}\n{breakdown}")

        summary = await self.summarize(raw_text)
        if summary:
            sections.append(f"{SUMMARY_HEADER}\n{summary}")

        if not sections:
            return content
        return "\n\n".join([content] + sections) if content else "\n\n".join(sections)
