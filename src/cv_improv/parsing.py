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
Parsing of model responses into result objects.

Two stages: locate the JSON span in free-form model output, then strictly
decode it. Anything that fails either stage produces a fallback result with
its `error` field set; these functions never raise.
"""

import json
import logging
import math
import re
from typing import Any, List, Optional, Sequence

from cv_improv.models import (
    LEVELS,
    RECOMMENDATION_CATEGORIES,
    CertificationSuggestion,
    ChangeExplanation,
    CompatibilityAnalysis,
    ExperienceAssessment,
    OptimizationResult,
    Recommendation,
)
from cv_improv.scoring import round_half_up

logger = logging.getLogger(__name__)

PARSE_ERROR = "Response parsing error"
ANALYSIS_FALLBACK_SUMMARY = "Analysis parsing failed. Please try again."

_JSON_SPAN = re.compile(r"\{.*\}", re.DOTALL)

def extract_json_block(raw: Optional[str]) -> Optional[dict]:
    """
    Returns the object decoded from the span between the first '{' and the
    last '}' in `raw`, or None if there is no such span or it is not a
    valid JSON object.
    """
    if not isinstance(raw, str):
        return None

    match = _JSON_SPAN.search(raw)
    if not match:
        logger.debug("No JSON object found in model response")
        return None

    try:
        data = json.loads(match.group(0))
    except (ValueError, RecursionError) as e:
        logger.debug(f"JSON span failed to decode: {e}")
        return None

    return data if isinstance(data, dict) else None

# --- field coercion -------------------------------------------------------

def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)

def _as_str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [_as_str(item) for item in value if isinstance(item, (str, int, float)) and not isinstance(item, bool)]

def _as_number(value: Any):
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if not isinstance(value, float):
        try:
            value = float(str(value).strip())
        except (TypeError, ValueError):
            return 0
    return value if math.isfinite(value) else 0

def _as_score(value: Any) -> int:
    """Coerces to an integer clamped to [0, 100]."""
    return max(0, min(100, round_half_up(_as_number(value))))

def _as_choice(value: Any, allowed: Sequence[str], default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in allowed:
        return value.strip().lower()
    return default

def _as_dicts(value: Any) -> List[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]

# --- default merging ------------------------------------------------------

def merge_compatibility_defaults(data: dict) -> CompatibilityAnalysis:
    """
    Builds a CompatibilityAnalysis from a (possibly partial) decoded response,
    filling each missing or mistyped field with its default.
    """
    experience = data.get("experienceAssessment")
    if not isinstance(experience, dict):
        experience = {}

    return CompatibilityAnalysis(
        compatibility_score=_as_score(data.get("compatibilityScore", 0)),
        ats_score=_as_score(data.get("atsScore", 0)),
        skills_matching=_as_str_list(data.get("skillsMatching")),
        skills_gaps=_as_str_list(data.get("skillsGaps")),
        keyword_gaps=_as_str_list(data.get("keywordGaps")),
        experience_assessment=ExperienceAssessment(
            relevant_years=_as_number(experience.get("relevantYears", 0)),
            alignment=_as_choice(experience.get("alignment"), LEVELS, "low"),
            gaps=_as_str_list(experience.get("gaps")),
        ),
        certification_suggestions=[
            CertificationSuggestion(
                name=_as_str(item.get("name")),
                priority=_as_choice(item.get("priority"), LEVELS, "low"),
                reason=_as_str(item.get("reason")),
            )
            for item in _as_dicts(data.get("certificationSuggestions"))
        ],
        recommendations=[
            Recommendation(
                category=_as_choice(item.get("category"), RECOMMENDATION_CATEGORIES, "content"),
                suggestion=_as_str(item.get("suggestion")),
                impact=_as_choice(item.get("impact"), LEVELS, "low"),
            )
            for item in _as_dicts(data.get("recommendations"))
        ],
        summary=_as_str(data.get("summary")),
    )

def merge_optimization_defaults(data: dict) -> OptimizationResult:
    """Builds an OptimizationResult from a (possibly partial) decoded response."""
    return OptimizationResult(
        optimized_cv=_as_str(data.get("optimizedCV")),
        changes_explanation=[
            ChangeExplanation(
                section=_as_str(item.get("section")),
                changes=_as_str(item.get("changes")),
                reasoning=_as_str(item.get("reasoning")),
            )
            for item in _as_dicts(data.get("changesExplanation"))
        ],
        keyword_optimizations=_as_str_list(data.get("keywordOptimizations")),
        ats_score=_as_score(data.get("atsScore", 0)),
        readability_score=_as_score(data.get("readabilityScore", 0)),
    )

# --- public parsers -------------------------------------------------------

def _preview(raw: Any, limit: int = 200) -> str:
    text = _as_str(raw)
    return text if len(text) <= limit else text[:limit] + "..."

def parse_compatibility_response(raw: Optional[str]) -> CompatibilityAnalysis:
    data = extract_json_block(raw)
    if data is None:
        logger.warning(f"Failed to parse compatibility response, using fallback. Raw: {_preview(raw)}")
        return CompatibilityAnalysis(summary=ANALYSIS_FALLBACK_SUMMARY, error=PARSE_ERROR)
    return merge_compatibility_defaults(data)

def parse_optimization_response(raw: Optional[str]) -> OptimizationResult:
    """
    Parses an optimization response. On failure the raw model output is
    returned as `optimized_cv` so the caller still gets the rewrite.
    """
    data = extract_json_block(raw)
    if data is None:
        logger.warning(f"Failed to parse optimization response, returning raw text. Raw: {_preview(raw)}")
        return OptimizationResult(optimized_cv=_as_str(raw), error=PARSE_ERROR)
    return merge_optimization_defaults(data)
