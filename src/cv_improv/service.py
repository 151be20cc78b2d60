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
Orchestrates prompt building, the model call, response parsing and scoring
for compatibility analysis and CV optimization.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from cv_improv.errors import ConfigurationError, ValidationError
from cv_improv.models import AnalysisRequest, CompatibilityAnalysis, OptimizationResult, SkillGapEntry
from cv_improv.parsing import parse_compatibility_response, parse_optimization_response
from cv_improv.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    OPTIMIZATION_SYSTEM_PROMPT,
    build_compatibility_prompt,
    build_optimization_prompt,
)
from cv_improv.rate_limit import RateLimitCounter
from cv_improv.scoring import calculate_ats_score
from cv_improv.skills import identify_skill_gaps

logger = logging.getLogger(__name__)

ANALYSIS_TEMPERATURE = 0.3
ANALYSIS_MAX_TOKENS = 2000
OPTIMIZATION_TEMPERATURE = 0.2
OPTIMIZATION_MAX_TOKENS = 3000

AnalysisData = Union[CompatibilityAnalysis, Mapping[str, Any]]

def keyword_gaps_of(analysis_data: Optional[AnalysisData]) -> List[str]:
    """Keyword gaps from a prior analysis, either a CompatibilityAnalysis or its wire dict."""
    if analysis_data is None:
        return []
    if isinstance(analysis_data, CompatibilityAnalysis):
        return list(analysis_data.keyword_gaps)
    gaps = analysis_data.get("keywordGaps") if isinstance(analysis_data, Mapping) else None
    if not isinstance(gaps, list):
        return []
    return [g for g in gaps if isinstance(g, str)]

class AnalysisService:
    """
    Stateless per call apart from the shared RateLimitCounter.

    `client` is anything with `is_configured` and
    `complete(system_prompt, user_prompt, temperature=, max_tokens=)`,
    normally a cv_improv.llm_client.LLMClient.
    """
    def __init__(self, client, counter: Optional[RateLimitCounter] = None):
        self.client = client
        self.counter = counter or RateLimitCounter()

    def _validate(self, cv_text: str, job_description: str) -> AnalysisRequest:
        if not getattr(self.client, "is_configured", False):
            raise ConfigurationError("AI provider is not configured. Please set OPENAI_API_KEY or GEMINI_API_KEY.")
        if not isinstance(cv_text, str) or not cv_text.strip():
            raise ValidationError("CV text is empty. Please provide a CV with content.")
        if not isinstance(job_description, str) or not job_description.strip():
            raise ValidationError("Job description is empty.")
        return AnalysisRequest(cv_text=cv_text, job_description=job_description)

    def _invoke(self, system_prompt: str, prompt: str, temperature: float, max_tokens: int) -> str:
        day = self.counter.reserve()
        try:
            text = self.client.complete(system_prompt, prompt, temperature=temperature, max_tokens=max_tokens)
        except BaseException:
            # Only completed calls count against the quota.
            self.counter.release(day)
            raise
        logger.debug(f"Model calls today: {self.counter.requests_today}/{self.counter.daily_limit}")
        return text

    def analyze_compatibility(self, cv_text: str, job_description: str) -> CompatibilityAnalysis:
        """
        Scores how well a CV matches a job description.
        The returned `ats_score` is computed locally against the keyword gaps
        the model reports, not taken from the model.
        """
        request = self._validate(cv_text, job_description)
        logger.info("Starting compatibility analysis...")

        prompt = build_compatibility_prompt(request.cv_text, request.job_description)
        raw = self._invoke(ANALYSIS_SYSTEM_PROMPT, prompt, ANALYSIS_TEMPERATURE, ANALYSIS_MAX_TOKENS)

        analysis = parse_compatibility_response(raw)
        analysis.ats_score = calculate_ats_score(request.cv_text, analysis.keyword_gaps)
        logger.info(f"    > Compatibility: {analysis.compatibility_score}, ATS: {analysis.ats_score}")
        return analysis

    def optimize_cv(self, cv_text: str, job_description: str, analysis_data: Optional[AnalysisData] = None) -> OptimizationResult:
        """
        Rewrites a CV for the target job, using a prior analysis as context
        when given. On an unparseable reply `optimized_cv` holds the raw text.
        """
        request = self._validate(cv_text, job_description)
        logger.info("Starting CV optimization...")

        prompt = build_optimization_prompt(request.cv_text, request.job_description, analysis_data)
        raw = self._invoke(OPTIMIZATION_SYSTEM_PROMPT, prompt, OPTIMIZATION_TEMPERATURE, OPTIMIZATION_MAX_TOKENS)

        result = parse_optimization_response(raw)
        result.ats_score = calculate_ats_score(result.optimized_cv, keyword_gaps_of(analysis_data))
        logger.info(f"    > Optimized CV ATS: {result.ats_score}")
        return result

    def identify_skill_gaps(self, cv_skills: Iterable[str], required_skills: Iterable[str]) -> List[SkillGapEntry]:
        return identify_skill_gaps(cv_skills, required_skills)
