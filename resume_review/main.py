import logging
import os
from typing import Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from . import __version__
from .config import Settings, load_settings
from .errors import AnalyzerError, ClientError, EmptyDocument, FileTooLarge, ServerError, UnsupportedFileType
from .extractor import ExtractionError, extract_text, is_supported
from .matcher import match_keywords
from .reviewer import ResumeReviewer, build_reviewer
from .schemas import ErrorResponse, HealthResponse, KeywordMatchResponse, ReviewResponse
from .uploads import UploadStore

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}

# Room for multipart boundaries and the jobDescription field on top of the file
FORM_OVERHEAD_BYTES = 64 * 1024

UPLOAD_PATHS = ("/upload", "/api/keyword-match")


# ✅ Process-scoped services, attached to app.state by create_app
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_reviewer(request: Request) -> ResumeReviewer:
    return request.app.state.reviewer


def get_upload_store(request: Request) -> UploadStore:
    return request.app.state.upload_store


def _error_response(error: AnalyzerError) -> JSONResponse:
    if isinstance(error, ClientError):
        logger.warning("Rejected request: %s", error.message)
    else:
        logger.error("Request failed: %s (%s)", error.message, error.details)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def _require_resume(resume: Optional[UploadFile]) -> UploadFile:
    if resume is None or not resume.filename:
        raise ClientError("No file uploaded")
    return resume


def _require_supported(resume: UploadFile) -> UploadFile:
    if not is_supported(resume.content_type):
        raise UnsupportedFileType(resume.content_type)
    return resume


@router.get("/api/health", response_model=HealthResponse)
def health():
    return {"status": "ok", "message": "Server is running"}


# ✅ Resume review through the LLM provider
@router.post("/upload", response_model=ReviewResponse, responses=ERROR_RESPONSES)
def review_resume(
    resume: Optional[UploadFile] = File(None),
    store: UploadStore = Depends(get_upload_store),
    reviewer: ResumeReviewer = Depends(get_reviewer),
):
    try:
        upload = _require_supported(_require_resume(resume))
        with store.receive(upload) as stored:
            try:
                resume_text = extract_text(stored.read_bytes(), stored.media_type)
            except ExtractionError as e:
                raise ServerError("Server error while analyzing resume.", str(e)) from e

            if not resume_text.strip():
                raise EmptyDocument()

            analysis = reviewer.review(resume_text)
    except AnalyzerError as e:
        return _error_response(e)
    except Exception as e:
        logger.exception("Upload error")
        return JSONResponse(
            status_code=500,
            content={"error": "Server error while analyzing resume.", "details": str(e)},
        )

    return {"analysis": analysis}


# ✅ Keyword overlap between the resume and a pasted job description
@router.post("/api/keyword-match", response_model=KeywordMatchResponse, responses=ERROR_RESPONSES)
def keyword_match(
    resume: Optional[UploadFile] = File(None),
    job_description: Optional[str] = Form(None, alias="jobDescription"),
    store: UploadStore = Depends(get_upload_store),
):
    try:
        upload = _require_resume(resume)
        if not job_description or not job_description.strip():
            raise ClientError("Job description is required")
        _require_supported(upload)

        with store.receive(upload) as stored:
            try:
                resume_text = extract_text(stored.read_bytes(), stored.media_type)
            except ExtractionError as e:
                raise ClientError("Could not read resume file.", str(e)) from e

            result = match_keywords(resume_text, job_description)
    except AnalyzerError as e:
        return _error_response(e)
    except Exception as e:
        logger.exception("Keyword match error")
        return JSONResponse(
            status_code=500,
            content={"error": "Something went wrong on server", "details": str(e)},
        )

    logger.info("Keyword match score %d (%d missing shown)", result.match_score, len(result.missing))
    return result.to_dict()


@router.get("/{page}.html", include_in_schema=False)
def serve_page(page: str, settings: Settings = Depends(get_settings)):
    path = os.path.join(settings.frontend_dir, f"{page}.html")
    if not os.path.isfile(path):
        return JSONResponse(status_code=404, content={"error": "Page not found"})
    return FileResponse(path, media_type="text/html")


async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [str(error["loc"][-1]) for error in exc.errors() if error.get("loc")]
    if "resume" in fields:
        message = "No file uploaded"
    else:
        message = ("Invalid request: " + ", ".join(fields)) if fields else "Invalid request"
    logger.warning("Rejected request to %s: %s", request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message})


async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Error: %s", exc, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "message": str(exc)})


def _mount_static(app: FastAPI, settings: Settings) -> None:
    # Mounted after the API routes so they take precedence
    if os.path.isdir(settings.images_dir):
        app.mount("/images", StaticFiles(directory=settings.images_dir), name="images")
    if os.path.isdir(settings.frontend_dir):
        app.mount("/", StaticFiles(directory=settings.frontend_dir, html=True), name="frontend")
    else:
        logger.info("Front-end directory %s not found; static files disabled", settings.frontend_dir)


def create_app(settings: Optional[Settings] = None, reviewer: Optional[ResumeReviewer] = None) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = FastAPI(
        title="Resume Review API",
        description="LLM feedback and keyword matching for uploaded resumes.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.reviewer = reviewer or build_reviewer(settings)
    app.state.upload_store = UploadStore(settings.upload_dir, settings.max_upload_bytes)

    @app.middleware("http")
    async def limit_upload_size(request: Request, call_next):
        # Reject by declared length before the multipart body is buffered
        if request.method == "POST" and request.url.path in UPLOAD_PATHS:
            length = request.headers.get("content-length")
            if length and length.isdigit() and int(length) > settings.max_upload_bytes + FORM_OVERHEAD_BYTES:
                error = FileTooLarge(settings.max_upload_bytes)
                logger.warning("Rejected request to %s: %s", request.url.path, error.message)
                return JSONResponse(status_code=error.status_code, content=error.to_dict())
        return await call_next(request)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, invalid_request)
    app.add_exception_handler(Exception, unhandled_error)
    app.include_router(router)
    _mount_static(app, settings)
    return app


app = create_app()


def run():
    settings = app.state.settings
    logger.info("Server is running on http://localhost:%d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
