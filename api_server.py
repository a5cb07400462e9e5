"""
Assessment Engine API Server
Questionnaire definitions, validated submissions, scored and interpreted results.

Version 1.0.0
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from assessment_engine import config
from assessment_engine.errors import AssessmentEngineError, DuplicateIdentifier
from assessment_engine.routers import (
    assessments_router,
    auth_router,
    health_router,
    responses_router,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("assessment_engine.api")

# ============================================
# App Configuration
# ============================================
app = FastAPI(
    title="Assessment Engine API",
    description="Assessment definition and response engine",
    version=config.API_VERSION,
)

# ============================================
# CORS Configuration
# ============================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# ============================================
# Error Mapping
# ============================================

@app.exception_handler(AssessmentEngineError)
async def engine_error_handler(request: Request, exc: AssessmentEngineError):
    if isinstance(exc, DuplicateIdentifier):
        logger.critical(f"{request.method} {request.url.path}: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.http_code} {exc.error_code.value}")
    return JSONResponse(status_code=exc.http_code, content={"detail": exc.to_detail()})


# ============================================
# Routers
# ============================================
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(assessments_router)
app.include_router(responses_router)


@app.get("/")
def root():
    return {
        "service": "assessment-engine",
        "version": config.API_VERSION,
        "docs": "/docs",
    }
