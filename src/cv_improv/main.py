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
Main entry point for the CV Improv CLI.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cv_improv.config import Settings, load_env_file
from cv_improv.errors import CVImprovError, ValidationError
from cv_improv.ingest import load_text
from cv_improv.llm_client import LLMClient
from cv_improv.models import CompatibilityAnalysis, OptimizationResult, SkillGapEntry
from cv_improv.rate_limit import RateLimitCounter
from cv_improv.scoring import calculate_ats_score
from cv_improv.service import AnalysisService
from cv_improv.skills import identify_skill_gaps, summarize_skill_gaps

logger = logging.getLogger(__name__)

console = Console()

def setup_logging(verbosity: int, quiet: bool = False, log_file: Optional[str] = None):
    """
    Configures logging:
    - Console (rich): default=WARNING, -v=INFO, -vv=DEBUG, -q=ERROR
    - File (optional): always DEBUG
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    if quiet:
        level = logging.ERROR
    elif verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    console_handler = RichHandler(console=Console(stderr=True), show_path=False)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    root.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        root.addHandler(file_handler)

    # Silence noisy SDK transports unless in full debug
    if verbosity < 3:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

def _split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]

def _print_json(data) -> None:
    console.print_json(json.dumps(data, ensure_ascii=False))

def _build_service() -> AnalysisService:
    settings = Settings.from_env()
    return AnalysisService(LLMClient(settings), RateLimitCounter(daily_limit=settings.daily_limit))

def _joined(items: List[str]) -> str:
    return escape(", ".join(items)) or "-"

def _render_analysis(analysis: CompatibilityAnalysis) -> None:
    experience = analysis.experience_assessment
    table = Table(show_header=False, box=None)
    table.add_row("Compatibility", f"{analysis.compatibility_score}/100")
    table.add_row("ATS score", f"{analysis.ats_score}/100")
    table.add_row("Matching skills", _joined(analysis.skills_matching))
    table.add_row("Skill gaps", _joined(analysis.skills_gaps))
    table.add_row("Missing keywords", _joined(analysis.keyword_gaps))
    table.add_row("Experience", f"{experience.relevant_years} yrs, {experience.alignment} alignment")
    console.print(Panel(table, title="Compatibility Analysis"))

    for rec in analysis.recommendations:
        console.print(f"  [bold]{rec.category}[/bold] ({rec.impact}): {escape(rec.suggestion)}")
    for cert in analysis.certification_suggestions:
        console.print(f"  [cyan]{escape(cert.name)}[/cyan] ({cert.priority}): {escape(cert.reason)}")
    if analysis.summary:
        console.print(Panel(Text(analysis.summary), title="Summary"))

def _render_optimization(result: OptimizationResult) -> None:
    console.print(Panel(Text(result.optimized_cv), title="Optimized CV"))
    for change in result.changes_explanation:
        console.print(f"  [bold]{escape(change.section)}[/bold]: {escape(change.changes)} ({escape(change.reasoning)})")
    if result.keyword_optimizations:
        console.print(f"  Keywords added: {_joined(result.keyword_optimizations)}")
    console.print(f"  ATS score: {result.ats_score}/100, readability: {result.readability_score}/100")

def _render_skill_gaps(gaps: List[SkillGapEntry]) -> None:
    table = Table(title="Skill Gaps")
    table.add_column("Skill")
    table.add_column("Category")
    table.add_column("Priority")
    table.add_column("Certifications")
    for gap in gaps:
        table.add_row(escape(gap.skill), gap.category, gap.priority, _joined(gap.certification_suggestions))
    console.print(table)

def cmd_analyze(args) -> int:
    cv_text = load_text(args.cv)
    jd_text = load_text(args.jd)
    analysis = _build_service().analyze_compatibility(cv_text, jd_text)

    if args.json:
        _print_json(analysis.to_dict())
    else:
        _render_analysis(analysis)
    if analysis.error:
        logger.warning("The model response could not be parsed; results are a fallback.")
    return 0

def cmd_optimize(args) -> int:
    cv_text = load_text(args.cv)
    jd_text = load_text(args.jd)

    analysis_data = None
    if args.analysis:
        try:
            analysis_data = json.loads(Path(args.analysis).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ValidationError(f"Could not read analysis file {args.analysis}: {e}") from e

    result = _build_service().optimize_cv(cv_text, jd_text, analysis_data)

    if args.output:
        Path(args.output).write_text(result.optimized_cv, encoding="utf-8")
        logger.info(f"Optimized CV written to: {args.output}")

    if args.json:
        _print_json(result.to_dict())
    else:
        _render_optimization(result)
    return 0

def cmd_skill_gaps(args) -> int:
    gaps = identify_skill_gaps(_split_list(args.cv_skills), _split_list(args.required))
    if args.json:
        _print_json({
            "skillGaps": [g.to_dict() for g in gaps],
            "summary": summarize_skill_gaps(gaps).to_dict(),
        })
    else:
        _render_skill_gaps(gaps)
    return 0

def cmd_score(args) -> int:
    score = calculate_ats_score(load_text(args.cv), _split_list(args.keywords))
    console.print(f"ATS score: {score}/100")
    return 0

def cmd_serve(args) -> int:
    import uvicorn
    from cv_improv.api import create_app

    logger.info(f"Serving on http://{args.host}:{args.port}")
    uvicorn.run(create_app(), host=args.host, port=args.port, log_config=None, access_log=args.verbose >= 1)
    return 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cv-improv", description="AI powered CV/job compatibility analysis")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase output verbosity (-v=INFO, -vv=DEBUG)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress status output (ERROR only)")
    parser.add_argument("--log-file", help="Also write DEBUG logs to this file")
    parser.add_argument("--env-file", help="Path to a .env file (default: ./.env if present)")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze CV compatibility with a job description")
    analyze.add_argument("--cv", required=True, help="CV file (.txt, .docx, .pdf)")
    analyze.add_argument("--jd", required=True, help="Job description file")
    analyze.add_argument("--json", action="store_true", help="Print the raw JSON result")
    analyze.set_defaults(func=cmd_analyze)

    optimize = sub.add_parser("optimize", help="Rewrite a CV for ATS compatibility")
    optimize.add_argument("--cv", required=True, help="CV file (.txt, .docx, .pdf)")
    optimize.add_argument("--jd", required=True, help="Job description file")
    optimize.add_argument("--analysis", help="JSON file from a previous 'analyze --json' run")
    optimize.add_argument("--output", help="Write the optimized CV text to this file")
    optimize.add_argument("--json", action="store_true", help="Print the raw JSON result")
    optimize.set_defaults(func=cmd_optimize)

    gaps = sub.add_parser("skill-gaps", help="List required skills missing from a CV")
    gaps.add_argument("--cv-skills", required=True, help="Comma-separated skills from the CV")
    gaps.add_argument("--required", required=True, help="Comma-separated skills the job requires")
    gaps.add_argument("--json", action="store_true", help="Print the raw JSON result")
    gaps.set_defaults(func=cmd_skill_gaps)

    score = sub.add_parser("score", help="Compute the heuristic ATS score of a CV")
    score.add_argument("--cv", required=True, help="CV file (.txt, .docx, .pdf)")
    score.add_argument("--keywords", default="", help="Comma-separated target keywords")
    score.set_defaults(func=cmd_score)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(func=cmd_serve)

    return parser

def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, quiet=args.quiet, log_file=args.log_file)
    load_env_file(args.env_file)

    try:
        return args.func(args)
    except CVImprovError as e:
        logger.error(f"{e}")
        return 1

def main():
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        # Use stderr so it captures attention even if stdout is redirected
        sys.stderr.write("\n\033[31m[-] Cancelled by user\033[0m\n")
        sys.exit(130)

if __name__ == "__main__":
    main()
