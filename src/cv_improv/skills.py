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
Skill gap resolution between CV skills and job-required skills.
"""

from typing import Dict, Iterable, List, Tuple

from cv_improv.models import SkillGapEntry, SkillGapSummary

# Checked in this order; the first vocabulary containing the skill wins.
SKILL_CATEGORIES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("technical", ("javascript", "python", "java", "react", "node.js", "sql", "aws", "docker")),
    ("analytical", ("excel", "sql", "tableau", "python", "r", "statistics")),
    ("management", ("project management", "leadership", "agile", "scrum")),
    ("marketing", ("google analytics", "sem", "social media", "content marketing")),
)

HIGH_PRIORITY_SKILLS = frozenset({
    "javascript", "python", "react", "node.js", "aws", "sql",
    "project management", "google analytics", "excel",
})

CERTIFICATIONS: Dict[str, List[str]] = {
    "aws": ["AWS Certified Solutions Architect", "AWS Certified Developer"],
    "google analytics": ["Google Analytics Individual Qualification", "Google Ads Certification"],
    "project management": ["PMP Certification", "Scrum Master Certification"],
    "microsoft office": ["Microsoft Office Specialist"],
    "salesforce": ["Salesforce Administrator", "Salesforce Developer"],
    "sql": ["Oracle Database Certification", "Microsoft SQL Server Certification"],
    "digital marketing": ["Google Ads Certification", "HubSpot Content Marketing"],
    "data analysis": ["Google Data Analytics Certificate", "IBM Data Science Certificate"],
}

def _covered(skill: str, cv_skills: List[str]) -> bool:
    """True if the skill and any CV skill contain one another (case-insensitive)."""
    needle = skill.lower()
    return any(needle in have or have in needle for have in cv_skills)

def skill_category(skill: str) -> str:
    key = skill.strip().lower()
    for category, vocabulary in SKILL_CATEGORIES:
        if key in vocabulary:
            return category
    return "other"

def skill_priority(skill: str) -> str:
    return "high" if skill.strip().lower() in HIGH_PRIORITY_SKILLS else "medium"

def certification_suggestions(skill: str) -> List[str]:
    return list(CERTIFICATIONS.get(skill.strip().lower(), []))

def identify_skill_gaps(cv_skills: Iterable[str], required_skills: Iterable[str]) -> List[SkillGapEntry]:
    """
    Returns a SkillGapEntry for every required skill the CV does not cover,
    in the order of `required_skills`.

    A required skill is covered when it is a substring of some CV skill, or
    some CV skill is a substring of it. Blank CV skills are ignored.
    """
    have = [s.lower() for s in (cv_skills or []) if isinstance(s, str) and s.strip()]

    gaps = []
    for skill in required_skills or []:
        if not isinstance(skill, str) or not skill.strip():
            continue
        if _covered(skill, have):
            continue
        gaps.append(SkillGapEntry(
            skill=skill,
            category=skill_category(skill),
            priority=skill_priority(skill),
            certification_suggestions=certification_suggestions(skill),
        ))
    return gaps

def summarize_skill_gaps(gaps: List[SkillGapEntry]) -> SkillGapSummary:
    """Totals for a list of gaps, as reported alongside the skill gap listing."""
    return SkillGapSummary(
        total_gaps=len(gaps),
        high_priority_gaps=sum(1 for g in gaps if g.priority == "high"),
        certification_opportunities=sum(len(g.certification_suggestions) for g in gaps),
    )
