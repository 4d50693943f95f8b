import logging
from typing import Optional

from google import genai
from google.genai import types

from intellisource.core.config import settings


logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I'm having trouble connecting right now. Please try again later."

class AIService:
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None) -> None:
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.client = genai.Client(api_key=self.api_key) if self.api_key else None
        self.text_model = model or settings.GEMINI_MODEL

    def chat(self, system_instruction: str, turns: list[tuple[str, str]]) -> str:
        """Sends the conversation to Gemini. If the key is missing or the call
        fails, returns the fixed fallback reply instead of raising.

        ``turns`` is a list of ``(role, text)`` pairs, role being ``"user"``
        or ``"model"``; the last pair is the new user message.
        """
        if not self.client:
            return FALLBACK_REPLY

        contents = [
            types.Content(role=role, parts=[types.Part(text=text)])
            for role, text in turns
        ]
        try:
            response = self.client.models.generate_content(
                model=self.text_model,
                contents=contents,
                config=types.GenerateContentConfig(system_instruction=system_instruction),
            )

            # response.text can be None if the response is empty or blocked
            if response.text is not None:
                return response.text

            logger.warning("AI API returned None. Triggering fallback.")
            return FALLBACK_REPLY

        except Exception as e:
            logger.warning(f"AI API Error: {e}")
            return FALLBACK_REPLY
