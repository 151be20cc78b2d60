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

import json
import threading
import time
import unittest

from cv_improv.errors import (
    ConfigurationError,
    RateLimitError,
    UpstreamAuthError,
    UpstreamError,
    ValidationError,
)
from cv_improv.parsing import PARSE_ERROR, parse_compatibility_response
from cv_improv.prompts import ANALYSIS_SYSTEM_PROMPT, OPTIMIZATION_SYSTEM_PROMPT
from cv_improv.rate_limit import RateLimitCounter
from cv_improv.scoring import calculate_ats_score
from cv_improv.service import AnalysisService, keyword_gaps_of

from stubs import (
    SAMPLE_ANALYSIS,
    SAMPLE_CV,
    SAMPLE_JD,
    SAMPLE_OPTIMIZATION,
    FakeClock,
    StubClient,
    wrap_in_prose,
)


class SlowClient(StubClient):
    """Holds each call open long enough for concurrent callers to overlap."""

    def complete(self, *args, **kwargs):
        time.sleep(0.05)
        return super().complete(*args, **kwargs)


class TestAnalyzeCompatibility(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.counter = RateLimitCounter(clock=self.clock)
        self.client = StubClient(reply=wrap_in_prose(SAMPLE_ANALYSIS))
        self.service = AnalysisService(self.client, self.counter)

    def test_ats_score_is_computed_locally(self):
        analysis = self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)

        self.assertEqual(analysis.ats_score, calculate_ats_score(SAMPLE_CV, ["Docker"]))
        self.assertEqual(analysis.ats_score, 45)
        self.assertNotEqual(analysis.ats_score, SAMPLE_ANALYSIS["atsScore"])
        self.assertEqual(analysis.compatibility_score, 72)
        self.assertEqual(analysis.keyword_gaps, ["Docker"])

    def test_model_call_parameters(self):
        self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)

        call = self.client.calls[0]
        self.assertEqual(call["system_prompt"], ANALYSIS_SYSTEM_PROMPT)
        self.assertEqual(call["temperature"], 0.3)
        self.assertEqual(call["max_tokens"], 2000)
        self.assertIn(SAMPLE_CV, call["user_prompt"])
        self.assertIn(SAMPLE_JD, call["user_prompt"])
        self.assertIn('"keywordGaps"', call["user_prompt"])

    def test_successful_call_is_counted(self):
        self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)
        self.assertEqual(self.counter.requests_today, 1)

    def test_unparseable_reply_degrades(self):
        self.client.reply = "I'm sorry, I can't help with that."
        analysis = self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)
        self.assertEqual(analysis.error, PARSE_ERROR)
        self.assertEqual(analysis.compatibility_score, 0)
        self.assertEqual(analysis.ats_score, calculate_ats_score(SAMPLE_CV, []))

    def test_missing_configuration(self):
        client = StubClient(configured=False)
        service = AnalysisService(client, self.counter)
        with self.assertRaises(ConfigurationError):
            service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)
        self.assertEqual(client.calls, [])

    def test_empty_inputs_rejected(self):
        for cv, jd in (("", SAMPLE_JD), ("   \n", SAMPLE_JD), (SAMPLE_CV, ""), (SAMPLE_CV, "\t")):
            with self.subTest(cv=cv, jd=jd):
                with self.assertRaises(ValidationError):
                    self.service.analyze_compatibility(cv, jd)
        self.assertEqual(self.client.calls, [])

    def test_daily_limit_blocks_before_network_call(self):
        for _ in range(100):
            self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)
        self.assertEqual(len(self.client.calls), 100)

        with self.assertRaises(RateLimitError):
            self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)
        self.assertEqual(len(self.client.calls), 100)

        self.clock.advance()
        self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)
        self.assertEqual(len(self.client.calls), 101)
        self.assertEqual(self.counter.requests_today, 1)

    def test_upstream_failure_propagates_and_is_not_counted(self):
        self.client.error = UpstreamAuthError("bad key")
        with self.assertRaises(UpstreamAuthError):
            self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)
        self.assertEqual(self.counter.requests_today, 0)

    def test_interrupted_call_is_not_counted(self):
        self.client.error = KeyboardInterrupt()
        with self.assertRaises(KeyboardInterrupt):
            self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)
        self.assertEqual(self.counter.requests_today, 0)

    def test_no_state_kept_between_calls(self):
        first = self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)
        first.skills_matching.append("Mutated")
        second = self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)
        self.assertEqual(second.skills_matching, ["Python", "SQL"])

    def test_concurrent_calls_cannot_overrun_the_limit(self):
        for _ in range(99):
            self.counter.record()
        client = SlowClient(reply=wrap_in_prose(SAMPLE_ANALYSIS))
        service = AnalysisService(client, self.counter)
        outcomes = []

        def worker():
            try:
                service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)
                outcomes.append("ok")
            except RateLimitError:
                outcomes.append("limited")

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(client.calls), 1)
        self.assertEqual(sorted(outcomes), ["limited"] * 4 + ["ok"])
        self.assertEqual(self.counter.requests_today, 100)

    def test_failed_call_frees_its_slot(self):
        for _ in range(99):
            self.counter.record()
        self.client.error = UpstreamError("timeout")
        with self.assertRaises(UpstreamError):
            self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)

        self.client.error = None
        self.service.analyze_compatibility(SAMPLE_CV, SAMPLE_JD)
        self.assertEqual(self.counter.requests_today, 100)


class TestOptimizeCV(unittest.TestCase):
    def setUp(self):
        self.counter = RateLimitCounter(clock=FakeClock())
        self.client = StubClient(reply=wrap_in_prose(SAMPLE_OPTIMIZATION))
        self.service = AnalysisService(self.client, self.counter)

    def test_without_prior_analysis(self):
        result = self.service.optimize_cv(SAMPLE_CV, SAMPLE_JD)

        self.assertTrue(result.optimized_cv)
        self.assertEqual(result.optimized_cv, SAMPLE_OPTIMIZATION["optimizedCV"])
        self.assertIn("No prior analysis", self.client.calls[0]["user_prompt"])
        self.assertEqual(result.ats_score, calculate_ats_score(result.optimized_cv, []))

    def test_model_call_parameters(self):
        self.service.optimize_cv(SAMPLE_CV, SAMPLE_JD)

        call = self.client.calls[0]
        self.assertEqual(call["system_prompt"], OPTIMIZATION_SYSTEM_PROMPT)
        self.assertEqual(call["temperature"], 0.2)
        self.assertEqual(call["max_tokens"], 3000)
        self.assertIn("don't fabricate experience", call["user_prompt"])

    def test_unparseable_reply_returned_verbatim(self):
        raw = "JOHN DOE\nBackend Engineer\nSkills: Python, SQL, Docker"
        self.client.reply = raw
        result = self.service.optimize_cv(SAMPLE_CV, SAMPLE_JD)
        self.assertEqual(result.optimized_cv, raw)
        self.assertEqual(result.error, PARSE_ERROR)

    def test_prior_analysis_embedded_and_used_for_score(self):
        analysis = parse_compatibility_response(json.dumps(SAMPLE_ANALYSIS))
        result = self.service.optimize_cv(SAMPLE_CV, SAMPLE_JD, analysis)

        prompt = self.client.calls[0]["user_prompt"]
        self.assertIn("Based on the compatibility analysis", prompt)
        self.assertIn('"keywordGaps": [\n    "Docker"\n  ]', prompt)
        self.assertEqual(result.ats_score, calculate_ats_score(SAMPLE_OPTIMIZATION["optimizedCV"], ["Docker"]))
        self.assertNotEqual(result.ats_score, SAMPLE_OPTIMIZATION["atsScore"])
        self.assertEqual(result.readability_score, 81)

    def test_prior_analysis_as_dict(self):
        result = self.service.optimize_cv(SAMPLE_CV, SAMPLE_JD, SAMPLE_ANALYSIS)
        self.assertEqual(result.ats_score, calculate_ats_score(SAMPLE_OPTIMIZATION["optimizedCV"], ["Docker"]))

    def test_same_preconditions_as_analysis(self):
        with self.assertRaises(ValidationError):
            self.service.optimize_cv("", SAMPLE_JD)

        exhausted = AnalysisService(self.client, RateLimitCounter(daily_limit=0))
        with self.assertRaises(RateLimitError):
            exhausted.optimize_cv(SAMPLE_CV, SAMPLE_JD)

        self.client.error = UpstreamError("timeout")
        with self.assertRaises(UpstreamError):
            self.service.optimize_cv(SAMPLE_CV, SAMPLE_JD)


class TestSkillGapsAndHelpers(unittest.TestCase):

    def test_service_delegates_skill_gaps(self):
        service = AnalysisService(StubClient(configured=False))
        gaps = service.identify_skill_gaps(["React", "Node.js"], ["react", "python", "node"])
        self.assertEqual([g.skill for g in gaps], ["python"])

    def test_keyword_gaps_of(self):
        self.assertEqual(keyword_gaps_of(None), [])
        self.assertEqual(keyword_gaps_of({"keywordGaps": ["A", 1, "B"]}), ["A", "B"])
        self.assertEqual(keyword_gaps_of({"keywordGaps": "A"}), [])
        self.assertEqual(keyword_gaps_of(parse_compatibility_response(json.dumps(SAMPLE_ANALYSIS))), ["Docker"])


if __name__ == '__main__':
    unittest.main()
