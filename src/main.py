import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.errors import InternalError, StockWatchError
from src.api.routes import billing, health, notifications, portfolio, stocks, support, watchlist
from src.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("stockwatch.api")

ALEMBIC_INI = Path(__file__).resolve().parents[1] / "alembic.ini"

origins = [
    "http://localhost:3000",
    settings.frontend_base_url,
    settings.app_base_url,
]


def run_migrations() -> None:
    alembic_cfg = Config(str(ALEMBIC_INI))
    command.upgrade(alembic_cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # DB start up after deploying
    if settings.run_migrations_on_startup and settings.database_configured:
        run_migrations()
    yield


app = FastAPI(title="StockWatch API", version=settings.app_version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin for origin in origins if origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ERROR HANDLERS ---------------------------------------------------------------------------------

def error_response(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    content = {"success": False, "error": error}
    if message and message != error:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(StockWatchError)
async def stockwatch_error_handler(request: Request, exc: StockWatchError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.error, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    missing, invalid = [], []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        (missing if err.get("type") == "missing" else invalid).append(field or "body")

    if missing:
        return error_response(400, "Missing required fields", f"Missing: {', '.join(missing)}")
    return error_response(400, "Invalid request", f"Invalid value for: {', '.join(invalid)}")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(InternalError.status_code, InternalError.error)


# ROUTES -----------------------------------------------------------------------------------------

@app.get("/")
def read_root():
    return {"message": "StockWatch API"}


app.include_router(health.router)
app.include_router(watchlist.router)
app.include_router(portfolio.router)
app.include_router(stocks.router)
app.include_router(notifications.router)
app.include_router(support.router)
app.include_router(billing.router)
