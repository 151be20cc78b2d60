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
HTTP boundary for the analysis pipeline (FastAPI).

Routes (all JSON):
  POST /analysis/analyze      {cvText, jobDescription}
  POST /analysis/optimize     {cvText, jobDescription, analysisData?}
  POST /analysis/skill-gaps   {cvSkills, requiredSkills}
  POST /analysis/ats-score    {cvText, keywords}
  GET  /health

Errors are returned as {success: false, message, code} with the status
carried by the raised CVImprovError.

Run with:  cv-improv serve  (or: uvicorn cv_improv.api:create_app --factory)
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from cv_improv.config import Settings, load_env_file
from cv_improv.errors import CVImprovError, ValidationError
from cv_improv.llm_client import LLMClient
from cv_improv.rate_limit import RateLimitCounter
from cv_improv.scoring import calculate_ats_score
from cv_improv.service import AnalysisService
from cv_improv.skills import summarize_skill_gaps

logger = logging.getLogger(__name__)

class AnalyzeRequest(BaseModel):
    cvText: str = Field(..., min_length=1)
    jobDescription: str = Field(..., min_length=1)

class OptimizeRequest(AnalyzeRequest):
    analysisData: Optional[Dict[str, Any]] = None

class SkillGapRequest(BaseModel):
    cvSkills: List[str] = Field(default_factory=list)
    requiredSkills: List[str] = Field(default_factory=list)

class ATSScoreRequest(BaseModel):
    cvText: str = ""
    keywords: List[str] = Field(default_factory=list)

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def _service(request: Request) -> AnalysisService:
    return request.app.state.service

router = APIRouter(prefix="/analysis", tags=["analysis"])

@router.post("/analyze")
def analyze(body: AnalyzeRequest, request: Request):
    analysis = _service(request).analyze_compatibility(body.cvText, body.jobDescription)
    payload = analysis.to_dict()
    payload["analyzedAt"] = _now()
    return {
        "success": True,
        "message": "CV analysis completed successfully",
        "data": {"analysis": payload},
    }

@router.post("/optimize")
def optimize(body: OptimizeRequest, request: Request):
    result = _service(request).optimize_cv(body.cvText, body.jobDescription, body.analysisData)
    payload = result.to_dict()
    payload["optimizedAt"] = _now()

    previous = (body.analysisData or {}).get("atsScore")
    if isinstance(previous, (int, float)) and not isinstance(previous, bool):
        payload["originalAtsScore"] = previous
        payload["improvement"] = result.ats_score - previous

    return {
        "success": True,
        "message": "CV optimization completed successfully",
        "data": {"optimization": payload},
    }

@router.post("/skill-gaps")
def skill_gaps(body: SkillGapRequest, request: Request):
    gaps = _service(request).identify_skill_gaps(body.cvSkills, body.requiredSkills)
    return {
        "success": True,
        "data": {
            "skillGaps": [g.to_dict() for g in gaps],
            "summary": summarize_skill_gaps(gaps).to_dict(),
        },
    }

@router.post("/ats-score")
def ats_score(body: ATSScoreRequest):
    return {"success": True, "data": {"atsScore": calculate_ats_score(body.cvText, body.keywords)}}

def _error_response(exc: CVImprovError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content={"success": False, "message": str(exc), "code": exc.code},
    )

def create_app(service: Optional[AnalysisService] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Builds the FastAPI application. A service may be injected (tests);
    otherwise one is constructed from the environment with a single
    process-wide RateLimitCounter.
    """
    if service is None:
        load_env_file()
        settings = settings or Settings.from_env()
        service = AnalysisService(
            LLMClient(settings),
            RateLimitCounter(daily_limit=settings.daily_limit),
        )

    app = FastAPI(
        title="CV Improv API",
        description="CV/job compatibility analysis and ATS optimization",
    )
    app.state.service = service
    app.include_router(router)

    @app.get("/health")
    def health():
        used, _ = service.counter.snapshot()
        return {"status": "ok", "requestsToday": used, "dailyLimit": service.counter.daily_limit}

    @app.exception_handler(CVImprovError)
    async def handle_cv_improv_error(request: Request, exc: CVImprovError):
        log = logger.warning if exc.http_status < 500 else logger.error
        log(f"{request.method} {request.url.path} failed: {exc.code}: {exc}")
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        fields = ", ".join(".".join(str(p) for p in err.get("loc", ())[1:]) or "body" for err in exc.errors())
        return _error_response(ValidationError(f"Invalid request: {fields}"))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error", "code": "INTERNAL_ERROR"},
        )

    return app
