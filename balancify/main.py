import logging
import os
from typing import Any, Dict

from fastapi import Body, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from balancify.ai.insight_client import check_insight_service_online, query_json
from balancify.core.errors import InsightServiceError, NotFoundError
from balancify.core.models import (
    AnalysisLookupResponse,
    FinancialSessionResponse,
    QuestionnaireAnswers,
    QuestionnaireResponse,
    SessionAnalysisResponse,
    SimulationRequest,
    SimulationResponse,
)
from balancify.core.pipeline import JsonGenerator, run_analysis, run_simulation
from balancify.core.report import generate_financial_report
from balancify.core.storage import MemStorage

logging.basicConfig(
    level=os.getenv("BALANCIFY_LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Balancify API")

storage = MemStorage()


def get_storage() -> MemStorage:
    return storage


def get_insight_generator() -> JsonGenerator:
    return query_json


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request data", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid questionnaire data",
            "details": jsonable_encoder(exc.errors(include_url=False, include_context=False)),
        },
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": str(exc)})


@app.exception_handler(InsightServiceError)
async def insight_service_handler(request: Request, exc: InsightServiceError):
    logger.error("Insight generation failed for %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to analyze financial data", "details": str(exc)},
    )


@app.get("/health")
def health():
    online = check_insight_service_online()
    return {"status": "ok", "insightService": "online" if online else "offline"}


@app.post("/api/questionnaire", response_model=QuestionnaireResponse)
def submit_questionnaire(
    answers: QuestionnaireAnswers,
    store: MemStorage = Depends(get_storage),
    generate_json: JsonGenerator = Depends(get_insight_generator),
):
    questionnaire = store.create_questionnaire(answers)
    result = run_analysis(answers, generate_json)
    analysis = store.create_analysis(questionnaire.id, result)
    logger.info("Stored analysis %s for questionnaire %s", analysis.id, questionnaire.id)
    return QuestionnaireResponse(questionnaire_id=questionnaire.id, analysis_id=analysis.id, **dict(result))


@app.get("/api/analysis/{questionnaire_id}", response_model=AnalysisLookupResponse)
def get_analysis(questionnaire_id: str, store: MemStorage = Depends(get_storage)):
    questionnaire = store.get_questionnaire(questionnaire_id)
    if questionnaire is None:
        raise NotFoundError("Questionnaire", questionnaire_id)
    analysis = store.get_analysis(questionnaire_id)
    if analysis is None:
        raise NotFoundError("Analysis", questionnaire_id)
    return AnalysisLookupResponse(questionnaire=questionnaire, analysis=analysis)


@app.get("/api/report/{questionnaire_id}")
def download_report(questionnaire_id: str, store: MemStorage = Depends(get_storage)):
    analysis = store.get_analysis(questionnaire_id)
    questionnaire = store.get_questionnaire(questionnaire_id)
    if analysis is None or questionnaire is None:
        raise NotFoundError("Analysis", questionnaire_id)
    pdf = generate_financial_report(questionnaire, analysis)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=financial-report-{questionnaire_id}.pdf"},
    )


@app.post("/api/simulate", response_model=SimulationResponse)
def simulate(payload: SimulationRequest, store: MemStorage = Depends(get_storage)):
    questionnaire = store.get_questionnaire(payload.questionnaire_id)
    if questionnaire is None:
        raise NotFoundError("Questionnaire", payload.questionnaire_id)
    return run_simulation(questionnaire.data, payload)


@app.post("/api/financial-session", response_model=FinancialSessionResponse)
def create_financial_session(form_data: Dict[str, Any] = Body(...), store: MemStorage = Depends(get_storage)):
    session_id = store.create_financial_session(form_data)
    logger.info("Created financial session %s", session_id)
    return FinancialSessionResponse(session_id=session_id)


@app.post("/api/analyze-session/{session_id}", response_model=SessionAnalysisResponse)
def analyze_session(
    session_id: str,
    store: MemStorage = Depends(get_storage),
    generate_json: JsonGenerator = Depends(get_insight_generator),
):
    form_data = store.get_financial_session(session_id)
    if form_data is None:
        raise NotFoundError("Session", session_id)
    answers = QuestionnaireAnswers.model_validate(form_data)
    questionnaire = store.create_questionnaire(answers)
    result = run_analysis(answers, generate_json)
    analysis = store.create_analysis(questionnaire.id, result)
    return SessionAnalysisResponse(
        questionnaire_id=questionnaire.id,
        analysis_id=analysis.id,
        session_id=session_id,
        **dict(result),
    )
