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
Runtime configuration, read from the environment.

  CV_IMPROV_PROVIDER      openai | gemini (default: inferred from which key is set)
  OPENAI_API_KEY          OpenAI credential
  GEMINI_API_KEY          Google AI Studio credential
  CV_IMPROV_MODEL         Model name override
  CV_IMPROV_DAILY_LIMIT   Model calls allowed per day (default 100)
  CV_IMPROV_LLM_TIMEOUT   Provider request timeout in seconds (default 60)
"""

import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from cv_improv.rate_limit import DEFAULT_DAILY_LIMIT

logger = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "openai": "gpt-4",
    "gemini": "gemini-1.5-flash",
}
DEFAULT_TIMEOUT = 60.0

def load_env_file(path: Optional[str] = None) -> bool:
    """Loads a .env file into os.environ without overriding existing values."""
    return load_dotenv(dotenv_path=path) if path else load_dotenv()

def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}; using {default}")
        return default

def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}; using {default}")
        return default

@dataclass(frozen=True)
class Settings:
    provider: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None
    daily_limit: int = DEFAULT_DAILY_LIMIT
    timeout: float = DEFAULT_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.provider)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env

        openai_key = env.get("OPENAI_API_KEY", "").strip()
        gemini_key = env.get("GEMINI_API_KEY", "").strip()
        provider = env.get("CV_IMPROV_PROVIDER", "").strip().lower() or None

        if provider is None:
            if openai_key:
                provider = "openai"
            elif gemini_key:
                provider = "gemini"
        elif provider not in DEFAULT_MODELS:
            logger.warning(f"Unknown provider '{provider}'. Supported: {', '.join(DEFAULT_MODELS)}")
            provider = None

        api_key = {"openai": openai_key, "gemini": gemini_key}.get(provider) or None
        if not api_key:
            logger.warning("No API key found. AI analysis and optimization are disabled.")

        model = env.get("CV_IMPROV_MODEL", "").strip() or DEFAULT_MODELS.get(provider)

        return cls(
            provider=provider,
            api_key=api_key,
            model=model,
            daily_limit=_int_env(env, "CV_IMPROV_DAILY_LIMIT", DEFAULT_DAILY_LIMIT),
            timeout=_float_env(env, "CV_IMPROV_LLM_TIMEOUT", DEFAULT_TIMEOUT),
        )
