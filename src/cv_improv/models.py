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
Data models for CV analysis and optimization.
Attributes are snake_case; `to_dict()` produces the camelCase wire shape.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

LEVELS = ("high", "medium", "low")
RECOMMENDATION_CATEGORIES = ("skills", "experience", "format", "content")
SKILL_CATEGORIES = ("technical", "analytical", "management", "marketing", "other")

@dataclass
class AnalysisRequest:
    """A CV and the job description it is measured against."""
    cv_text: str
    job_description: str

@dataclass
class ExperienceAssessment:
    """Model's view of how the candidate's experience lines up with the role."""
    relevant_years: Union[int, float] = 0
    alignment: str = "low"  # high | medium | low
    gaps: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "relevantYears": self.relevant_years,
            "alignment": self.alignment,
            "gaps": list(self.gaps),
        }

@dataclass
class CertificationSuggestion:
    name: str = ""
    priority: str = "low"
    reason: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "priority": self.priority, "reason": self.reason}

@dataclass
class Recommendation:
    category: str = "content"  # skills | experience | format | content
    suggestion: str = ""
    impact: str = "low"

    def to_dict(self) -> dict:
        return {"category": self.category, "suggestion": self.suggestion, "impact": self.impact}

@dataclass
class CompatibilityAnalysis:
    """
    Result of comparing a CV with a job description.
    `ats_score` is always computed locally by `scoring.calculate_ats_score`,
    never taken from the model. `error` is set only when the model response
    could not be parsed and this object is a fallback.
    """
    compatibility_score: int = 0
    ats_score: int = 0
    skills_matching: List[str] = field(default_factory=list)
    skills_gaps: List[str] = field(default_factory=list)
    keyword_gaps: List[str] = field(default_factory=list)
    experience_assessment: ExperienceAssessment = field(default_factory=ExperienceAssessment)
    certification_suggestions: List[CertificationSuggestion] = field(default_factory=list)
    recommendations: List[Recommendation] = field(default_factory=list)
    summary: str = ""
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "compatibilityScore": self.compatibility_score,
            "atsScore": self.ats_score,
            "skillsMatching": list(self.skills_matching),
            "skillsGaps": list(self.skills_gaps),
            "keywordGaps": list(self.keyword_gaps),
            "experienceAssessment": self.experience_assessment.to_dict(),
            "certificationSuggestions": [c.to_dict() for c in self.certification_suggestions],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "summary": self.summary,
        }
        if self.error:
            data["error"] = self.error
        return data

@dataclass
class ChangeExplanation:
    """One section-level change made while optimizing a CV."""
    section: str = ""
    changes: str = ""
    reasoning: str = ""

    def to_dict(self) -> dict:
        return {"section": self.section, "changes": self.changes, "reasoning": self.reasoning}

@dataclass
class OptimizationResult:
    optimized_cv: str = ""
    changes_explanation: List[ChangeExplanation] = field(default_factory=list)
    keyword_optimizations: List[str] = field(default_factory=list)
    ats_score: int = 0
    readability_score: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "optimizedCV": self.optimized_cv,
            "changesExplanation": [c.to_dict() for c in self.changes_explanation],
            "keywordOptimizations": list(self.keyword_optimizations),
            "atsScore": self.ats_score,
            "readabilityScore": self.readability_score,
        }
        if self.error:
            data["error"] = self.error
        return data

@dataclass
class SkillGapEntry:
    """A required skill missing from the CV, with suggested certifications."""
    skill: str
    category: str = "other"
    priority: str = "medium"  # high | medium
    certification_suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "skill": self.skill,
            "category": self.category,
            "priority": self.priority,
            "certificationSuggestions": list(self.certification_suggestions),
        }

@dataclass
class SkillGapSummary:
    total_gaps: int = 0
    high_priority_gaps: int = 0
    certification_opportunities: int = 0

    def to_dict(self) -> dict:
        return {
            "totalGaps": self.total_gaps,
            "highPriorityGaps": self.high_priority_gaps,
            "certificationOpportunities": self.certification_opportunities,
        }
