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
Heuristic ATS (Applicant Tracking System) scoring.

The score is a weighted sum of independent factors:

  keyword density     0-40  (fraction of target keywords present * 40)
  email present       10    ('@' anywhere in the text)
  phone number        10    (ddd[-. ]ddd[-. ]dddd)
  standard sections   5 each distinct section heading found
  length              15 if longer than 500 chars, else 10
  bullet points       10 if more than 5 markers, else 5

capped at 100.
"""

import math
import re
from typing import Iterable, List

STANDARD_SECTIONS = (
    "experience", "education", "skills", "summary", "objective",
    "work experience", "employment", "qualifications", "achievements",
)

PHONE_PATTERN = re.compile(r"\d{3}[-.\s]?\d{3}[-.\s]?\d{4}")
BULLET_PATTERN = re.compile(r"•|·|-\s")

def round_half_up(value: float) -> int:
    """Rounds halves upward: 22.5 -> 23, where the builtin round gives 22."""
    return math.floor(value + 0.5)

def count_ats_sections(text: str) -> int:
    """Counts distinct standard section keywords present in `text` (case-insensitive)."""
    lowered = text.lower()
    return sum(1 for section in STANDARD_SECTIONS if section in lowered)

def keyword_density(text: str, keywords: List[str]) -> float:
    """Fraction of `keywords` found as case-insensitive substrings. 0.0 for no keywords."""
    lowered = text.lower()
    matches = sum(1 for keyword in keywords if keyword.lower() in lowered)
    return matches / max(1, len(keywords))

def calculate_ats_score(cv_text: str, keywords: Iterable[str]) -> int:
    """
    Computes an ATS compatibility score in [0, 100] for `cv_text`
    against a target keyword list. Pure and deterministic.
    """
    text = (cv_text or "").lower()
    keywords = [k for k in (keywords or []) if isinstance(k, str)]

    factors = {
        "keyword_density": keyword_density(text, keywords) * 40,
        "contact_info": 10 if "@" in text else 0,
        "phone_number": 10 if PHONE_PATTERN.search(text) else 0,
        "sections": count_ats_sections(text) * 5,
        "readable_format": 15 if len(text) > 500 else 10,
        "bullet_points": 10 if len(BULLET_PATTERN.findall(text)) > 5 else 5,
    }

    return min(100, round_half_up(sum(factors.values())))
