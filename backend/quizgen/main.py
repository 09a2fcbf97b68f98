import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from fastapi import APIRouter, FastAPI, File, Request, Response, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quizgen.config import Settings, load_settings
from quizgen.errors import NoFileProvided, QuizServiceError
from quizgen.models.document_models import ErrorResponse, UploadedDocument, UploadResponse
from quizgen.models.quiz_models import GenerateQuestionsRequest, GenerateQuestionsResponse
from quizgen.utils.question_generation import QuizGenerator
from quizgen.utils.text_extraction import PdfReaderFn, extract_text, read_pdf_text

logger = logging.getLogger(__name__)

T = TypeVar("T")

DISCONNECT_POLL_SECONDS = 0.25
# nginx's "client closed request"
CLIENT_CLOSED_REQUEST = 499

router = APIRouter()

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


class ClientDisconnected(Exception):
    pass


async def _cancel_on_disconnect(request: Request, work: Awaitable[T]) -> T:
    """Await `work`, cancelling it if the client goes away first."""
    task = asyncio.ensure_future(work)
    try:
        while not task.done():
            if await request.is_disconnected():
                task.cancel()
                # let the call unwind so its concurrency slot is free again
                await asyncio.wait({task})
                raise ClientDisconnected()
            await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
    except asyncio.CancelledError:
        task.cancel()
        raise
    return task.result()


# Routes
@router.get("/", include_in_schema=False)
def root_get():
    return {"ok": True, "service": "quizgen"}


@router.head("/", include_in_schema=False)
def root_head():
    return Response(status_code=200)


@router.get("/healthz", include_in_schema=False)
def health_get():
    return {"ok": True}


@router.head("/healthz", include_in_schema=False)
def health_head():
    return Response(status_code=200)


@router.post("/api/upload", response_model=UploadResponse, responses=ERROR_RESPONSES)
async def upload_pdf(request: Request, pdf: Optional[UploadFile] = File(None)):
    if pdf is None:
        raise NoFileProvided()

    data = await pdf.read()
    document = UploadedDocument(filename=pdf.filename, content=data)
    logger.info("Received upload %r (%d bytes)", pdf.filename, len(data))

    # PyPDF2 is CPU-bound; keep it off the event loop
    extracted = await run_in_threadpool(extract_text, document, request.app.state.pdf_reader)
    return UploadResponse(text=extracted.text)


@router.post(
    "/api/generate_questions", response_model=GenerateQuestionsResponse, responses=ERROR_RESPONSES
)
async def generate_questions(request: Request, body: Optional[GenerateQuestionsRequest] = None):
    # a missing body is the same as missing text
    text = body.text if body is not None else None
    generator: QuizGenerator = request.app.state.quiz_generator
    try:
        questions = await _cancel_on_disconnect(request, generator.generate_quiz(text))
    except ClientDisconnected:
        logger.info("Client disconnected, abandoned question generation")
        return Response(status_code=CLIENT_CLOSED_REQUEST)
    return GenerateQuestionsResponse(questions=questions)


# Error handlers
async def handle_service_error(request: Request, exc: QuizServiceError):
    # Server-side failures are logged where they are raised.
    if exc.status_code < 500:
        logger.info("%s on %s", exc.reason, request.url.path)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_validation_error(request: Request, exc: RequestValidationError):
    logger.info("Rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    # 404/405 and framework-level body errors (e.g. a multipart body without a boundary)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def create_app(
    settings: Optional[Settings] = None,
    quiz_generator: Optional[QuizGenerator] = None,
    pdf_reader: PdfReaderFn = read_pdf_text,
) -> FastAPI:
    """
    Build the service. Settings are resolved once here (or passed in) and
    handed to the collaborators; nothing below reads the environment.
    """
    if settings is None:
        settings = load_settings()

    app = FastAPI(title="quizgen")
    app.state.settings = settings
    app.state.quiz_generator = quiz_generator or QuizGenerator.from_settings(settings)
    app.state.pdf_reader = pdf_reader

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(QuizServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.include_router(router)
    return app
