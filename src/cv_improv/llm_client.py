# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Client for interacting with Large Language Models (LLMs).
Supports OpenAI and Google AI Studio (Gemini).

Provider failures are translated into the cv_improv error taxonomy:
credential rejected, provider throttling, or a generic upstream error.
The client never retries; callers decide.
"""

import logging
from typing import Optional

from cv_improv.config import Settings
from cv_improv.errors import (
    ConfigurationError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamRateLimitError,
)

# Logger is configured in main.py
logger = logging.getLogger(__name__)

def _status_of(exc: Exception) -> Optional[int]:
    """HTTP status carried by an SDK exception (`status_code` on OpenAI, `code` on GenAI)."""
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None

def classify_provider_error(exc: Exception, provider: str) -> UpstreamError:
    status = _status_of(exc)
    if status in (401, 403):
        return UpstreamAuthError(f"{provider} API authentication failed. Please check your API key.")
    if status == 429:
        return UpstreamRateLimitError(f"{provider} API rate limit exceeded. Please try again later.")
    return UpstreamError(f"{provider} API request failed: {exc}")

class LLMClient:
    """
    Abstraction layer for LLM providers.
    Exposes a single `complete` call taking a system and a user prompt.
    """
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings.from_env()
        self.provider = self.settings.provider
        self.model = self.settings.model
        self._client = None

    @property
    def is_configured(self) -> bool:
        return self.settings.is_configured

    def complete(self, system_prompt: str, user_prompt: str, temperature: float = 0.3, max_tokens: int = 2000) -> str:
        """
        Sends one prompt to the configured provider and returns the text reply.
        Blocks for at most the configured timeout.
        """
        if not self.is_configured:
            raise ConfigurationError("AI provider is not configured. Please set OPENAI_API_KEY or GEMINI_API_KEY.")

        logger.info(f"Calling {self.provider} model {self.model} (temperature={temperature}, max_tokens={max_tokens})")
        try:
            if self.provider == "openai":
                text = self._complete_openai(system_prompt, user_prompt, temperature, max_tokens)
            else:
                text = self._complete_gemini(system_prompt, user_prompt, temperature, max_tokens)
        except ImportError as e:
            logger.error(f"Missing dependency for provider {self.provider}: {e}")
            raise ConfigurationError(f"SDK for provider '{self.provider}' is not installed.") from e
        except Exception as e:
            logger.error(f"LLM call failed: {e}")
            raise classify_provider_error(e, self.provider) from e

        if not text:
            raise UpstreamError(f"{self.provider} returned an empty response.")
        return text

    def _complete_openai(self, system_prompt, user_prompt, temperature, max_tokens) -> str:
        import openai

        if self._client is None:
            self._client = openai.OpenAI(
                api_key=self.settings.api_key,
                timeout=self.settings.timeout,
                max_retries=0,
            )
        response = self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content

    def _complete_gemini(self, system_prompt, user_prompt, temperature, max_tokens) -> str:
        from google import genai
        from google.genai import types

        if self._client is None:
            self._client = genai.Client(
                api_key=self.settings.api_key,
                http_options=types.HttpOptions(timeout=int(self.settings.timeout * 1000)),
            )
        response = self._client.models.generate_content(
            model=self.model,
            contents=user_prompt,
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=temperature,
                max_output_tokens=max_tokens,
            ),
        )
        return response.text
