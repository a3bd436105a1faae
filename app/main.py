# app/main.py
import logging

import httpx
from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings
from .api import auth as auth_router
from .api import user as user_router
from .api import book as book_router
from .api import category as category_router
from .api import tag as tag_router
from .api import review as review_router
from .api import review_draft as review_draft_router
from .api import rating as rating_router
from .api import reply as reply_router
from .api import comment as comment_router
from .schemas.error import ErrorResponse
from .database import engine

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Book Review API", version="0.1.0")

origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
)

app.include_router(auth_router.router)
app.include_router(user_router.router)
app.include_router(book_router.router)
app.include_router(category_router.router)
app.include_router(tag_router.router)
app.include_router(review_router.router)
app.include_router(review_draft_router.router)
app.include_router(rating_router.router)
app.include_router(reply_router.router)
app.include_router(comment_router.router)


@app.get("/health", tags=["meta"])
def health():
    return {"status": "ok", "environment": settings.environment}


@app.get("/health/db", tags=["meta"])
def health_db():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ok", "database": "reachable"}
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return {"status": "error", "database": "unreachable"}


# Global error handlers: 모든 실패 응답은 {"message": ...}
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Validation Error"
    return _error(400, message)


@app.exception_handler(httpx.HTTPError)
async def upstream_exception_handler(request: Request, exc: httpx.HTTPError):
    # 외부 API 오류 내용은 응답에 노출하지 않는다
    logger.exception("Book catalog request failed: %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "Internal Server Error")


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error: %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "Internal Server Error")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "Internal Server Error")
