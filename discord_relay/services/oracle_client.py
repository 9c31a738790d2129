import logging
from typing import Optional

import openai

logger = logging.getLogger(__name__)

SUMMARY_PROMPT_TEMPLATE = """You are a helpful assistant. Summarize the following Discord message into clear, bullet-point {language}, preserving key tickers/symbols and statuses.

Output rules:
- Use short, simple {language} sentences
- Keep tickers (e.g., BTC, SOL) in Latin script
- If the message contains a recap/list, provide one bullet per line
- Do NOT add trading advice; only explain
- No preface, return only the summary lines

Message:
\"\"\"
{text}
\"\"\""""


class OpenAIOracle:
    """Text oracle backed by the OpenAI chat completions API."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", summary_language: str = "Telugu"):
        self.client = openai.AsyncOpenAI(api_key=api_key)
        self.model = model
        self.summary_language = summary_language

    async def complete(self, prompt: str, temperature: float = 0.1) -> Optional[str]:
        """Send a single-turn prompt and return the reply text, or None if empty."""
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
        )
        content = response.choices[0].message.content
        if not content:
            logger.error("OpenAI response content is empty.")
            return None
        return content

    async def summarize(self, text: str) -> Optional[str]:
        """Summarize a message. Failures are reported as no summary."""
        if not text or not text.strip():
            return None

        prompt = SUMMARY_PROMPT_TEMPLATE.format(language=self.summary_language, text=text)
        try:
            content = await self.complete(prompt, temperature=0.3)
        except openai.OpenAIError as e:
            logger.error(f"Error calling OpenAI API for summary: {e}")
            return None

        content = (content or "").strip()
        return content or None

    async def close(self) -> None:
        await self.client.close()


def create_oracle(api_key: Optional[str], model: str, summary_language: str) -> Optional[OpenAIOracle]:
    if not api_key:
        logger.warning("OPENAI_API_KEY not found. AI summaries and signal analysis disabled.")
        return None
    return OpenAIOracle(api_key=api_key, model=model, summary_language=summary_language)
