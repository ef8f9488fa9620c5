import google.generativeai as genai
import logging
import time
from typing import Optional

from app.config.config import Config
from app.utils.exceptions import UpstreamError

logger = logging.getLogger(__name__)

NO_RESPONSE = "No response"


class GeminiClient:
    """Thin async wrapper around a Gemini generative model (no retries)"""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.model_name = model_name or Config.GEMINI_MODEL

        # Configure Gemini
        genai.configure(api_key=api_key or Config.GEMINI_API_KEY)
        self.model = genai.GenerativeModel(self.model_name)

        logger.info(f"Gemini client initialized (model: {self.model_name})")

    async def generate(self, prompt: str) -> str:
        """
        Send a prompt and return the reply text

        Args:
            prompt: Full prompt text

        Returns:
            Reply text, or "No response" when Gemini returns no candidate text

        Raises:
            UpstreamError: transport or API failure
        """
        logger.info(f"Sending request to Gemini API ({len(prompt)} chars)")
        start_time = time.time()

        try:
            response = await self.model.generate_content_async(prompt)
        except Exception as e:
            logger.error(f"✗ Gemini request failed: {type(e).__name__}: {e}")
            raise UpstreamError("Gemini request failed", detail=str(e)) from e

        elapsed_time = time.time() - start_time
        text = self._extract_text(response)
        if text is None:
            logger.warning(f"Gemini returned no candidate text after {elapsed_time:.2f}s")
            return NO_RESPONSE

        logger.info(f"✓ API Response received in {elapsed_time:.2f}s ({len(text)} chars)")
        return text

    @staticmethod
    def _extract_text(response) -> Optional[str]:
        """Text of the first candidate's parts; None when there is none"""
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return None

        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        texts = [part.text for part in parts if getattr(part, "text", None)]
        return "".join(texts) or None
