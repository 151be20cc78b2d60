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
Prompt construction for compatibility analysis and CV optimization.
The JSON shapes requested here are the ones `cv_improv.parsing` reads back.
"""

import json
from dataclasses import is_dataclass
from typing import Any, Optional

ANALYSIS_SYSTEM_PROMPT = (
    "You are a professional HR expert and career counselor specializing in CV optimization "
    "and job matching. You provide detailed, actionable feedback to help candidates improve "
    "their job application success rate."
)

OPTIMIZATION_SYSTEM_PROMPT = (
    "You are an expert CV writer and ATS optimization specialist. Your goal is to rewrite CVs "
    "to maximize ATS compatibility while maintaining readability and professional tone. "
    "Focus on keyword optimization, quantified achievements, and industry-specific terminology."
)

COMPATIBILITY_JSON_SHAPE = """{
  "compatibilityScore": number,
  "skillsMatching": ["skill1", "skill2"],
  "skillsGaps": ["missing_skill1", "missing_skill2"],
  "keywordGaps": ["keyword1", "keyword2"],
  "experienceAssessment": {
    "relevantYears": number,
    "alignment": "high|medium|low",
    "gaps": ["gap1", "gap2"]
  },
  "certificationSuggestions": [
    {
      "name": "certification_name",
      "priority": "high|medium|low",
      "reason": "explanation"
    }
  ],
  "recommendations": [
    {
      "category": "skills|experience|format|content",
      "suggestion": "specific_recommendation",
      "impact": "high|medium|low"
    }
  ],
  "summary": "Overall assessment summary"
}"""

OPTIMIZATION_JSON_SHAPE = """{
  "optimizedCV": "full_optimized_cv_text",
  "changesExplanation": [
    {
      "section": "section_name",
      "changes": "description_of_changes",
      "reasoning": "why_these_changes_help"
    }
  ],
  "keywordOptimizations": ["keyword1", "keyword2"],
  "atsScore": number,
  "readabilityScore": number
}"""

def build_compatibility_prompt(cv_text: str, job_description: str) -> str:
    return f"""
Please analyze the compatibility between this CV and job description. Provide a comprehensive assessment including:

**CV TEXT:**
{cv_text}

**JOB DESCRIPTION:**
{job_description}

**ANALYSIS REQUIRED:**

1. **COMPATIBILITY SCORE (0-100)**: Overall match percentage with detailed reasoning

2. **SKILL ANALYSIS**:
   - Skills present in CV that match job requirements
   - Missing critical skills from CV

3. **EXPERIENCE ALIGNMENT**:
   - Relevant experience that matches job requirements
   - Experience gaps or misalignments
   - Years of experience assessment

4. **KEYWORD ANALYSIS**:
   - Important keywords from job description missing in CV
   - Industry-specific terms to include

5. **CERTIFICATION SUGGESTIONS**:
   - Certifications mentioned in the job description or recommended for the role
   - Priority level for each certification

6. **IMPROVEMENT RECOMMENDATIONS**:
   - Specific areas to strengthen in CV
   - Content restructuring and achievement quantification opportunities

**RESPONSE FORMAT:** Respond ONLY with valid JSON in the following format:
{COMPATIBILITY_JSON_SHAPE}
"""

def _serialize_analysis(analysis_data: Any) -> str:
    """Renders a prior analysis (dataclass or mapping) as indented JSON."""
    if is_dataclass(analysis_data):
        analysis_data = analysis_data.to_dict()
    return json.dumps(analysis_data, indent=2, ensure_ascii=False, default=str)

def build_optimization_prompt(cv_text: str, job_description: str, analysis_data: Optional[Any] = None) -> str:
    """
    Builds the rewrite prompt. `analysis_data` is the prior compatibility
    analysis used as context; it may be omitted.
    """
    if analysis_data:
        analysis_section = _serialize_analysis(analysis_data)
        intro = "Based on the compatibility analysis, please optimize this CV"
    else:
        analysis_section = "No prior analysis is available. Infer missing keywords from the job description."
        intro = "Please optimize this CV"

    return f"""
{intro} to better match the job requirements while maintaining ATS compatibility and professional readability.

**ORIGINAL CV:**
{cv_text}

**TARGET JOB:**
{job_description}

**ANALYSIS DATA:**
{analysis_section}

**OPTIMIZATION REQUIREMENTS:**

1. **ATS OPTIMIZATION**: Incorporate missing keywords naturally throughout the CV
2. **SKILL ENHANCEMENT**: Emphasize relevant skills the candidate actually has
3. **ACHIEVEMENT QUANTIFICATION**: Add metrics and numbers where the original supports them
4. **PROFESSIONAL FORMATTING**: Maintain clean, scannable structure
5. **KEYWORD DENSITY**: Optimize for ATS without keyword stuffing

**GUIDELINES:**
- Keep the same general structure and length
- Maintain truthfulness - don't fabricate experience, employers, dates or qualifications
- Use action verbs and quantifiable results
- Optimize for both ATS and human readers

**RESPONSE FORMAT:** Respond ONLY with valid JSON in the following format:
{OPTIMIZATION_JSON_SHAPE}
"""
