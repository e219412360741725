from __future__ import annotations
import google.generativeai as genai
import logging
import os
import time
from typing import Dict, List, Optional
from legallens.utils.config import AppConfig

logger = logging.getLogger(__name__)

# Gemini names the assistant side of a conversation "model"
ROLE_MAP = {"user": "user", "assistant": "model"}


class GeminiClient:
    def __init__(self, config: AppConfig):
        api_key = os.getenv("GOOGLE_API_KEY")
        if not api_key:
            raise ValueError("GOOGLE_API_KEY not set")
        genai.configure(api_key=api_key)
        self.config = config
        self.model = genai.GenerativeModel(config.gemini_model)

    def _generation_config(self) -> Dict[str, float]:
        return {"temperature": self.config.temperature, "max_output_tokens": self.config.max_tokens}

    def _call(self, model, contents, max_retries: Optional[int]) -> str:
        attempts = max_retries or self.config.llm_max_retries
        last_err = None
        for attempt in range(attempts):
            try:
                rsp = model.generate_content(
                    contents,
                    generation_config=self._generation_config(),
                    request_options={"timeout": self.config.request_timeout},
                )
                return rsp.text
            except Exception as e:  # pragma: no cover - external API
                last_err = e
                logger.debug("Gemini attempt %d/%d failed: %s", attempt + 1, attempts, e)
                if attempt + 1 < attempts:
                    time.sleep(1 + attempt)
        raise RuntimeError(f"Gemini generation failed: {last_err}")

    def generate(self, prompt: str, max_retries: Optional[int] = None) -> str:
        return self._call(self.model, prompt, max_retries)

    def chat(self, system_prompt: str, messages: List[Dict[str, str]], max_retries: Optional[int] = None) -> str:
        """Multi-turn call: `messages` are {"role": "user"|"assistant", "content": str}, oldest first."""
        model = genai.GenerativeModel(self.config.gemini_model, system_instruction=system_prompt)
        contents = [{"role": ROLE_MAP.get(m["role"], "user"), "parts": [m["content"]]} for m in messages]
        return self._call(model, contents, max_retries)


def get_llm(config: AppConfig) -> Optional[GeminiClient]:
    """Remote client when enabled and configured, else None (callers go straight to local fallbacks)."""
    if not config.use_gemini:
        return None
    try:
        return GeminiClient(config)
    except Exception as e:
        logger.warning("Gemini unavailable, using local fallbacks: %s", e)
        return None
