import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.database import engine, init_db
from app.logging import init_logging, RequestLoggingMiddleware, setup_query_logging
from app.routes import router

logger = logging.getLogger("string_analyzer")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("String Analyzer Service started")
    yield


app = FastAPI(
    title="String Analyzer Service",
    version="1.0.0",
    description=(
        "Stores strings and their derived properties.\n\n"
        "Features:\n"
        "- Length, palindrome, unique character, word count and frequency analysis\n"
        "- Lookup and delete by exact value\n"
        "- Structured filters and a simple natural language filter"
    ),
    lifespan=lifespan,
)

# Initialize logging and middleware
init_logging()
app.add_middleware(RequestLoggingMiddleware)
setup_query_logging(engine)

app.include_router(router, tags=["Strings"])


@app.get("/")
def root():
    return {"message": "String Analyzer Service running. Visit /docs for API documentation."}


# -------------------------------
# Unified error response handlers
# -------------------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(
        "HTTPException: %s %s -> %s | detail=%s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.detail,
    )
    body = {"error": exc.detail if isinstance(exc.detail, str) else "Error"}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    logger.warning(
        "ValidationError: %s %s | errors=%s",
        request.method,
        request.url.path,
        errors,
    )
    message = "Validation failed"
    if request.method == "POST" and request.url.path.rstrip("/").endswith("/strings"):
        message = 'Invalid request body or missing "value" field'
    return JSONResponse(
        status_code=400,
        content={
            "error": message,
            "details": errors,
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception: %s %s",
        request.method,
        request.url.path,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})
