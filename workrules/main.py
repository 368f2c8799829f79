import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from workrules.api.v1.analyze import router as analyze_router
from workrules.api.v1.router import api_v1_router
from workrules.core.config import settings, validate_settings_for_production
from workrules.core.exceptions import AnalysisError
from workrules.core.logging import setup_logging
from workrules.core.metrics import PrometheusMiddleware, metrics_response
from workrules.core.middleware import RequestLoggingMiddleware
from workrules.core.rate_limit import limiter
from workrules.core.sentry import init_sentry

# Configure logging before anything else
setup_logging()
init_sentry()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    validate_settings_for_production()
    logger.info(
        "Starting workplace rules analyzer (model=%s, score_mode=%s)",
        settings.anthropic_model,
        settings.compliance_score_mode,
    )

    yield

    logger.info("Workplace rules analyzer shut down")


app = FastAPI(
    title="Workplace Rules Analyzer",
    description="Compliance review of workplace-rules documents via the Anthropic API",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs" if settings.app_debug else None,
    redoc_url="/api/redoc" if settings.app_debug else None,
)


@app.exception_handler(AnalysisError)
async def _analysis_error_handler(request: Request, exc: AnalysisError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors())
    return JSONResponse(status_code=400, content={"error": "요청 형식이 올바르지 않습니다.", "details": details})


# Log unhandled exceptions with the full traceback
@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled %s on %s %s:\n%s", type(exc).__name__, request.method, request.url.path, "".join(tb))
    return JSONResponse(
        status_code=500,
        content={"error": "서버 오류가 발생했습니다.", "details": f"{type(exc).__name__}: {exc}"},
    )


# Rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Request logging + metrics middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(PrometheusMiddleware)

# CORS — parse allowed_origins from settings (comma-separated)
_origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(api_v1_router)

# Unversioned path used by the upload page
app.include_router(analyze_router, prefix="/api")


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_response()
