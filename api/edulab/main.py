import logging

from contextlib import asynccontextmanager, contextmanager
from datetime import date
from typing import Any, AsyncIterator, Dict, Iterator, Optional

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from edulab.core.config import Settings, get_settings, settings
from edulab.core.errors import ApiError, ExtractionError, UnsupportedType, UpstreamError, bad_request
from edulab.core.gemini import GeminiClient, LLMClient
from edulab.core.logging import setup_logging
from edulab.ingestion.parser import SUPPORTED_EXTS, extract_text
from edulab.ingestion.uploads import stored_upload
from edulab.schemas.studio import (
    AskRequest,
    AskResponse,
    CountedTextRequest,
    FlashcardsResponse,
    MindmapRequest,
    MindmapResponse,
    MotivationRequest,
    MotivationResponse,
    QuizResponse,
    StudyPlanRequest,
    StudyPlanResponse,
    SummarizeTextRequest,
    SummaryResponse,
)
from edulab.studio.prompts import (
    FLASHCARDS_DEFAULT,
    FLASHCARDS_MAX,
    FLASHCARDS_MIN,
    QUIZ_DEFAULT,
    QUIZ_MAX,
    QUIZ_MIN,
    Mode,
    parse_count,
    parse_exam_date,
    parse_hours,
    study_days,
)
from edulab.studio.tools import run_feature

setup_logging(settings.log_level, secrets=[settings.gemini_api_key])
logger = logging.getLogger("api")

ASK_MODES = [m for m in Mode if m is not Mode.STUDY_PLAN]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if not settings.api_key_configured:
        if settings.require_api_key:
            raise RuntimeError("Missing GEMINI_API_KEY")
        logger.warning("GEMINI_API_KEY is not set; generation requests will fail until it is configured")

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    app.state.llm = GeminiClient.from_settings(settings)
    logger.info(
        "startup env=%s model=%s upload_dir=%s max_upload_mb=%s",
        settings.app_env,
        settings.gemini_model,
        settings.upload_dir,
        settings.max_upload_mb,
    )
    yield
    await app.state.llm.aclose()


app = FastAPI(
    title="EDU AI Lab API",
    version="1.0.0",
    description="Summaries, quizzes, flashcards, mind maps, study plans and motivation notes from study material.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials="*" not in settings.cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_llm_client(request: Request) -> LLMClient:
    return request.app.state.llm


@app.exception_handler(ApiError)
async def _api_error(_request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def _invalid_request(_request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "invalid_request", "details": details})


@app.exception_handler(Exception)
async def _unhandled(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error: %s", exc)
    return JSONResponse(status_code=500, content={"error": "internal_error"})


@contextmanager
def failure_tag(tag: str) -> Iterator[None]:
    """Turn upstream/extraction failures into ``500 {error: tag}``."""
    try:
        yield
    except (UpstreamError, ExtractionError) as e:
        logger.exception("%s err=%s", tag, e)
        hint = None
        if isinstance(e, UpstreamError) and e.status_code in (401, 403):
            hint = "Check the GEMINI_API_KEY configured on the server."
        elif isinstance(e, UpstreamError) and e.status_code == 429:
            hint = "The generation service quota was exceeded; try again later."
        raise ApiError(500, tag, details=str(e), hint=hint) from e


def require_text(text: Optional[str]) -> str:
    if not text or not text.strip():
        raise bad_request("missing_text", hint="Send a non-empty 'text' field.")
    return text


def count_or_400(raw: Any, default: int, low: int, high: int) -> int:
    try:
        return parse_count(raw, default, low, high)
    except ValueError as e:
        raise bad_request("invalid_count", details=str(e), hint=f"Use a whole number between {low} and {high}.")


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "✅ EDU AI Lab backend is running."


@app.get("/health")
async def health(cfg: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {
        "status": "ok" if cfg.api_key_configured else "degraded",
        "env": cfg.app_env,
        "model": cfg.gemini_model,
        "api_key_configured": cfg.api_key_configured,
    }


@app.post("/summarize-text", response_model=SummaryResponse)
async def summarize_text(req: SummarizeTextRequest, llm: LLMClient = Depends(get_llm_client)) -> SummaryResponse:
    text = require_text(req.text)
    with failure_tag("summarize_failed"):
        summary = await run_feature(
            llm, Mode.SUMMARY, text, {"language": req.summary_language}, language=req.language
        )
    return SummaryResponse(summary=summary)


@app.post("/summarize-pdf", response_model=SummaryResponse)
@app.post("/upload", response_model=SummaryResponse)
async def summarize_upload(
    file: Optional[UploadFile] = File(default=None),
    language: Optional[str] = Form(default=None),
    llm: LLMClient = Depends(get_llm_client),
    cfg: Settings = Depends(get_settings),
) -> SummaryResponse:
    """
    Upload -> temp file -> extract text -> summarize.
    The temp file is removed on every exit path.
    """
    if file is None or not file.filename:
        raise bad_request("no_file", hint="Send the document as multipart field 'file'.")

    async with stored_upload(file, cfg.upload_dir, cfg.max_upload_bytes) as up:
        with failure_tag("upload_failed"):
            try:
                text = extract_text(up.path, up.extension)
            except UnsupportedType as e:
                raise bad_request("unsupported_type", details=str(e), hint=f"Allowed: {', '.join(SUPPORTED_EXTS)}")
            if not text.strip():
                raise bad_request("empty_file", hint="No extractable text found (scanned PDFs are not OCR'd).")
            summary = await run_feature(llm, Mode.SUMMARY, text, language=language)

    return SummaryResponse(summary=summary)


@app.post("/generate-quiz", response_model=QuizResponse)
async def generate_quiz(req: CountedTextRequest, llm: LLMClient = Depends(get_llm_client)) -> QuizResponse:
    text = require_text(req.text)
    count = count_or_400(req.count, QUIZ_DEFAULT, QUIZ_MIN, QUIZ_MAX)
    with failure_tag("quiz_failed"):
        quiz = await run_feature(llm, Mode.QUIZ, text, {"count": count}, language=req.language)
    return QuizResponse(quiz=quiz)


@app.post("/flashcards", response_model=FlashcardsResponse)
async def flashcards(req: CountedTextRequest, llm: LLMClient = Depends(get_llm_client)) -> FlashcardsResponse:
    text = require_text(req.text)
    count = count_or_400(req.count, FLASHCARDS_DEFAULT, FLASHCARDS_MIN, FLASHCARDS_MAX)
    with failure_tag("flashcards_failed"):
        cards = await run_feature(llm, Mode.FLASHCARDS, text, {"count": count}, language=req.language)
    return FlashcardsResponse(cards=cards)


@app.post("/mindmap", response_model=MindmapResponse)
async def mindmap(req: MindmapRequest, llm: LLMClient = Depends(get_llm_client)) -> MindmapResponse:
    text = require_text(req.text)
    with failure_tag("mindmap_failed"):
        mermaid = await run_feature(llm, Mode.MINDMAP, text, language=req.language)
    return MindmapResponse(mermaid=mermaid)


@app.post("/study-planner", response_model=StudyPlanResponse)
@app.post("/plan", response_model=StudyPlanResponse)
async def study_planner(req: StudyPlanRequest, llm: LLMClient = Depends(get_llm_client)) -> StudyPlanResponse:
    subjects = [s.strip() for s in req.subjects if s and s.strip()]
    if not subjects or not (req.exam_date or "").strip():
        raise bad_request("missing_fields", hint="Send a non-empty 'subjects' list and an 'examDate' (YYYY-MM-DD).")

    today = date.today()
    try:
        exam_date = parse_exam_date(req.exam_date)
        study_days(exam_date, today)
    except ValueError as e:
        raise bad_request("invalid_exam_date", details=str(e), hint="Use a future date in YYYY-MM-DD format.")

    try:
        hours = parse_hours(req.hours_per_day)
    except ValueError as e:
        raise bad_request("invalid_hours", details=str(e))

    options = {"subjects": subjects, "exam_date": exam_date, "hours_per_day": hours, "today": today}
    with failure_tag("plan_failed"):
        plan = await run_feature(llm, Mode.STUDY_PLAN, options=options, language=req.language)
    return StudyPlanResponse(plan=plan)


@app.post("/motivation", response_model=MotivationResponse)
async def motivation(req: MotivationRequest, llm: LLMClient = Depends(get_llm_client)) -> MotivationResponse:
    with failure_tag("motivation_failed"):
        message = await run_feature(llm, Mode.MOTIVATION, req.context or "", language=req.language)
    return MotivationResponse(message=message)


@app.post("/ask", response_model=AskResponse)
async def ask(req: AskRequest, llm: LLMClient = Depends(get_llm_client)) -> AskResponse:
    """Generic entry point: one of the text modes picked by ``mode``."""
    allowed = ", ".join(m.value for m in ASK_MODES)
    try:
        mode = Mode((req.mode or "").strip().lower())
    except ValueError:
        raise bad_request("unsupported_mode", details=f"mode={req.mode!r}", hint=f"One of: {allowed}")
    if mode not in ASK_MODES:
        raise bad_request("unsupported_mode", details=f"mode={mode.value!r}", hint="Use /study-planner for study plans.")

    content = req.text if req.text is not None else req.question
    options: Dict[str, Any] = {}
    if mode is Mode.MOTIVATION:
        content = content or ""
    else:
        content = require_text(content)
    if mode is Mode.QUIZ:
        options["count"] = count_or_400(req.count, QUIZ_DEFAULT, QUIZ_MIN, QUIZ_MAX)
    elif mode is Mode.FLASHCARDS:
        options["count"] = count_or_400(req.count, FLASHCARDS_DEFAULT, FLASHCARDS_MIN, FLASHCARDS_MAX)

    with failure_tag("ask_failed"):
        answer = await run_feature(llm, mode, content, options, language=req.language)
    return AskResponse(answer=answer)
