"""
Ramblin' Returns API: Main Application
======================================
FastAPI glue layer between the Ramblin' Returns dashboard and an
OpenAI-compatible generation API. Turns bank statements into spending
analysis and investment ideas, answers finance questions, and checks
links for security risks.

Endpoints:
    GET  /  : Health check
    POST /api/analyze-statement  : Statement text → analysis + merchants
    POST /api/chat  : Conversation → assistant reply
    POST /api/check-url  : URL → resolved URL + risk assessment
         (aliases /api/url-security, /api/unshorten-url)
    POST /api/investment-recommendations  : Merchants → buy/hold/sell opinions
    POST /api/extract-pdf  : PDF upload → text

Error contract:
    Every failure is answered with {"error": <user-safe message>,
    "kind": <error kind>} and a non-2xx status: 400 for invalid input
    (including statements the model rejected), 500 for upstream
    problems. Internal diagnostics are logged, never returned.
"""

import logging
import traceback
from fastapi import FastAPI, Depends, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ramblin.security import verify_api_key
from ramblin.schemas import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    InvestmentRequest,
    InvestmentResponse,
    PdfTextResponse,
    StatementRequest,
    StatementResponse,
    UrlCheckRequest,
    UrlCheckResponse,
)
from ramblin.core.result import Err, ErrorKind, USER_MESSAGES, invalid_input
from ramblin.core.statement import analyze_statement
from ramblin.core.chat import chat_reply
from ramblin.core.url_checker import check_url, resolve_redirects
from ramblin.core.investments import recommend_investments
from ramblin.core.pdf_text import PdfExtractionError, extract_pdf_text
from ramblin.llm.llm_client import GenerationClient, get_client

# Configure logging for production visibility
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Ramblin' Returns API",
    description="AI-powered statement analysis, investment ideas and URL security checks",
    version="1.0.0"
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_resolver():
    """FastAPI dependency returning the redirect resolver."""
    return resolve_redirects


def error_response(err: Err) -> JSONResponse:
    """Log the internal diagnostic and answer with the user-safe message."""
    logger.warning(f"[{err.kind.value}] status={err.status_code} {err.message}")
    body = ErrorResponse(error=err.user_message, kind=err.kind.value)
    return JSONResponse(status_code=err.status_code, content=body.model_dump())


def respond(result):
    if isinstance(result, Err):
        return error_response(result)
    return result.value


# ---------- EXCEPTION HANDLERS ----------

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors (400), caught before any upstream call."""
    fields = [".".join(str(p) for p in e["loc"] if p != "body") for e in exc.errors()]
    err = Err(ErrorKind.INVALID_USER_INPUT, f"Invalid request body: {fields}")
    return error_response(err)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "kind": "http_error"},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler: logs the traceback and answers 500 with a generic
    message. Exception text never reaches the browser.
    """
    logger.error(f"Unhandled exception: {exc}")
    logger.error(traceback.format_exc())
    return JSONResponse(
        status_code=500,
        content={
            "error": USER_MESSAGES[ErrorKind.UPSTREAM_UNAVAILABLE],
            "kind": "internal_error"
        }
    )


# ---------- HEALTH CHECK ----------

@app.get("/")
def health_check():
    """Health check endpoint for deployment pings."""
    return {"status": "running", "service": "Ramblin' Returns API"}


# ---------- STATEMENT ANALYSIS ----------

@app.post(
    "/api/analyze-statement",
    response_model=StatementResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
)
def analyze_statement_endpoint(
    data: StatementRequest,
    client: GenerationClient = Depends(get_client)
):
    """
    Validate the statement, analyze spending, and extract merchants.

    A rejected statement answers 400 with the model's reason. If only
    merchant extraction fails, the analysis is still returned and
    "merchants" is listed under "degraded".
    """
    return respond(analyze_statement(data.text, client))


# ---------- CHAT ----------

@app.post(
    "/api/chat",
    response_model=ChatResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
)
def chat_endpoint(
    data: ChatRequest,
    client: GenerationClient = Depends(get_client)
):
    """Answer the latest user message in the conversation."""
    return respond(chat_reply(data.messages, client))


# ---------- URL CHECK ----------

@app.post(
    "/api/check-url",
    response_model=UrlCheckResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
)
@app.post(
    "/api/url-security",
    response_model=UrlCheckResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
)
@app.post(
    "/api/unshorten-url",
    response_model=UrlCheckResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
)
def check_url_endpoint(
    data: UrlCheckRequest,
    client: GenerationClient = Depends(get_client),
    resolver=Depends(get_resolver)
):
    """Resolve redirects and assess the final URL's security risk."""
    return respond(check_url(data.url, client, resolver=resolver))


# ---------- INVESTMENTS ----------

@app.post(
    "/api/investment-recommendations",
    response_model=InvestmentResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
)
def investment_endpoint(
    data: InvestmentRequest,
    client: GenerationClient = Depends(get_client)
):
    """Buy/hold/sell opinions for the first few merchants."""
    return respond(recommend_investments(data.merchants, client))


# ---------- PDF EXTRACTION ----------

@app.post(
    "/api/extract-pdf",
    response_model=PdfTextResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
)
def extract_pdf_endpoint(file: UploadFile | None = File(default=None)):
    """Extract text from an uploaded bank statement PDF."""
    if file is None:
        return error_response(invalid_input("No file provided"))

    try:
        text = extract_pdf_text(file.file.read())
    except PdfExtractionError as e:
        return error_response(invalid_input(str(e)))

    return PdfTextResponse(text=text)
