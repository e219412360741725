"""HTTP endpoints mirroring the web client's calls.

    POST /api/ai       {action, content}                      -> {clauses} | {answer}
    POST /api/chat     {message, document, conversationHistory} -> {response}
    POST /api/upload   multipart file                          -> {document}
    POST /api/analyze  {text}                                  -> {document}
    POST /api/export   {document}                              -> text/plain report

Run with: uvicorn legallens.api.routes:app
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse

from legallens.analysis.clauses import ClauseClassifier
from legallens.analysis.pipeline import analyze_pasted, analyze_upload, sections_from_content
from legallens.api.schemas import AIRequest, AnalyzeTextRequest, ChatRequest, ChatResponse, ExportRequest
from legallens.qa.chat import ChatAssistant
from legallens.report.text_export import build_analysis_text, export_filename
from legallens.utils.config import AppConfig
from legallens.utils.errors import IntakeError, InvalidRequestAction
from legallens.utils.logs import configure_logging
from legallens.utils.types import ChatTurn, Document

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])


def _classifier(request: Request) -> ClauseClassifier:
    return request.app.state.classifier


def _assistant(request: Request) -> ChatAssistant:
    return request.app.state.assistant


def _config(request: Request) -> AppConfig:
    return request.app.state.config


@router.post("/ai")
def ai_action(payload: AIRequest, request: Request):
    try:
        if payload.action == "classifyClauses":
            if not isinstance(payload.content, str):
                raise HTTPException(status_code=400, detail="content must be a string")
            sections = sections_from_content(payload.content, _config(request).splitter_strategy)
            clauses = _classifier(request).classify_sections(sections)
            return {"clauses": [c.to_dict() for c in clauses]}
        if payload.action == "askQuestion":
            content = payload.content if isinstance(payload.content, dict) else {}
            question = content.get("question")
            if not question or not isinstance(content.get("document"), dict):
                raise HTTPException(status_code=400, detail="question and document are required")
            document = Document.from_dict(content["document"])
            return {"answer": _assistant(request).answer(str(question), document)}
        raise InvalidRequestAction(payload.action)
    except InvalidRequestAction as e:
        logger.info("Rejected request: %s", e)
        return JSONResponse(status_code=400, content={"error": "Invalid action"})
    except HTTPException:
        raise
    except Exception:
        logger.exception("AI API error")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


@router.post("/chat", response_model=ChatResponse)
def chat(payload: ChatRequest, request: Request):
    if not payload.message:
        return JSONResponse(status_code=400, content={"error": "Message is required"})
    if not payload.document:
        return JSONResponse(status_code=400, content={"error": "Document is required"})
    try:
        document = Document.from_dict(payload.document)
        history = [ChatTurn.from_dict(m) for m in payload.conversationHistory]
    except (TypeError, ValueError, AttributeError):
        return JSONResponse(status_code=400, content={"error": "Malformed document or history"})
    return ChatResponse(response=_assistant(request).reply(payload.message, document, history))


def _intake_error(e: IntakeError) -> JSONResponse:
    logger.info("Intake rejected: %s", e.message)
    return JSONResponse(status_code=e.status_code, content={"error": e.message})


@router.post("/upload")
async def upload(request: Request, file: UploadFile = File(...)):
    data = await file.read()
    try:
        document = analyze_upload(_config(request), file.filename or "", data, file.content_type,
                                  classifier=_classifier(request))
    except IntakeError as e:
        return _intake_error(e)
    return {"document": document.to_dict()}


@router.post("/analyze")
def analyze(payload: AnalyzeTextRequest, request: Request):
    try:
        document = analyze_pasted(_config(request), payload.text, classifier=_classifier(request))
    except IntakeError as e:
        return _intake_error(e)
    return {"document": document.to_dict()}


@router.post("/export", response_class=PlainTextResponse)
def export(payload: ExportRequest):
    try:
        document = Document.from_dict(payload.document)
    except (TypeError, ValueError, AttributeError):
        return JSONResponse(status_code=400, content={"error": "Malformed document"})
    return PlainTextResponse(
        build_analysis_text(document),
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


def create_app(config: Optional[AppConfig] = None, classifier: Optional[ClauseClassifier] = None,
               assistant: Optional[ChatAssistant] = None) -> FastAPI:
    config = config or AppConfig.from_env()
    configure_logging(config.log_level)
    app = FastAPI(title="LegalLens API", version="0.1.0")
    app.state.config = config
    app.state.classifier = classifier or ClauseClassifier(config)
    app.state.assistant = assistant or ChatAssistant(config)
    app.include_router(router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
