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

import unittest

from cv_improv.scoring import calculate_ats_score, count_ats_sections, keyword_density, round_half_up


class TestCalculateATSScore(unittest.TestCase):

    def test_empty_input_uses_structure_bonuses_only(self):
        # length bonus 10 + bullet bonus 5, no division by zero
        self.assertEqual(calculate_ats_score("", []), 15)

    def test_sample_cv(self):
        cv = "John Doe john@x.com 555-123-4567 Experience: ... Skills: Python, SQL"
        # email 10 + phone 10 + 2 sections 10 + length 10 + bullets 5
        self.assertEqual(calculate_ats_score(cv, ["Docker"]), 45)

    def test_keyword_density_weighting(self):
        # 2 of 4 keywords -> 20
        score = calculate_ats_score("Python developer with Docker", ["python", "docker", "kubernetes", "go"])
        self.assertEqual(score, 35)

    def test_keywords_are_case_insensitive(self):
        self.assertEqual(calculate_ats_score("PYTHON", ["python"]), 55)

    def test_density_is_rounded(self):
        # 1/3 * 40 = 13.33 -> total 28.33
        self.assertEqual(calculate_ats_score("python", ["python", "java", "go"]), 28)

    def test_half_point_totals_round_up(self):
        # 3/16 * 40 = 7.5 -> total 22.5
        keywords = ["a1", "a2", "a3"] + [f"miss{i}" for i in range(13)]
        self.assertEqual(calculate_ats_score("a1 a2 a3", keywords), 23)
        # 1/16 * 40 = 2.5 -> total 17.5
        self.assertEqual(calculate_ats_score("a1", keywords), 18)

    def test_round_half_up(self):
        for value, expected in ((22.5, 23), (17.5, 18), (28.33, 28), (0.49, 0), (-0.5, 0)):
            with self.subTest(value=value):
                self.assertEqual(round_half_up(value), expected)

    def test_phone_separators(self):
        for phone in ("555-123-4567", "555.123.4567", "555 123 4567", "5551234567"):
            with self.subTest(phone=phone):
                self.assertEqual(calculate_ats_score(phone, []), 25)

    def test_bullet_threshold(self):
        five = "\n".join(["• item"] * 5)
        six = "\n".join(["• item"] * 6)
        dashes = "\n".join(["- item"] * 6)
        self.assertEqual(calculate_ats_score(five, []), 15)
        self.assertEqual(calculate_ats_score(six, []), 20)
        self.assertEqual(calculate_ats_score(dashes, []), 20)

    def test_hyphenated_words_are_not_bullets(self):
        text = " ".join(["full-stack"] * 10)
        self.assertEqual(calculate_ats_score(text, []), 15)

    def test_long_text_bonus(self):
        self.assertEqual(calculate_ats_score("x" * 500, []), 15)
        self.assertEqual(calculate_ats_score("x" * 501, []), 20)

    def test_capped_at_100(self):
        sections = "Summary Objective Work Experience Employment Education Skills Qualifications Achievements "
        bullets = "\n".join(["• Delivered results"] * 10)
        cv = sections + "jane@example.com 555-123-4567 Python AWS " + bullets + " filler" * 100
        self.assertEqual(calculate_ats_score(cv, ["python", "aws"]), 100)

    def test_deterministic_integer(self):
        cv = "Experience\n- Built APIs\n- Led team\njane@x.io"
        scores = {calculate_ats_score(cv, ["APIs", "Go"]) for _ in range(5)}
        self.assertEqual(len(scores), 1)
        score = scores.pop()
        self.assertIsInstance(score, int)
        self.assertTrue(0 <= score <= 100)


class TestHelpers(unittest.TestCase):

    def test_sections_counted_once(self):
        self.assertEqual(count_ats_sections("experience experience EXPERIENCE"), 1)

    def test_work_experience_counts_both_keywords(self):
        self.assertEqual(count_ats_sections("Work Experience"), 2)

    def test_keyword_density_no_keywords(self):
        self.assertEqual(keyword_density("anything", []), 0.0)


if __name__ == '__main__':
    unittest.main()
