"""
Health check and system status API endpoints.
"""
import logging
from datetime import datetime
from typing import Dict, Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config.settings import get_settings
from ..models.db.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health", summary="Health Check")
def health_check() -> Dict[str, Any]:
    """
    Basic liveness check.
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "message": f"Welcome to {settings.app_name} v{settings.app_version}",
        "environment": settings.environment,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/health/detailed", summary="Detailed Health Check")
def detailed_health_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Detailed health check with configuration and database status.
    """
    settings = get_settings()
    health_status = {
        "status": "healthy",
        "app_info": {
            "name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "debug": settings.debug,
            "testing": settings.testing,
        },
        "configuration": {
            "log_level": settings.log_level,
            "database_type": "sqlite" if settings.database_url.startswith("sqlite") else "other",
            "cors_enabled": settings.cors_enabled,
            "api_docs_enabled": settings.api_docs_enabled,
            "token_expiry_minutes": settings.access_token_expire_minutes,
        },
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["database"] = "reachable"
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        health_status["database"] = "unreachable"
        health_status["status"] = "unhealthy"

    config_issues = settings.validate_required_settings()
    if config_issues:
        if health_status["status"] == "healthy":
            health_status["status"] = "degraded"
        health_status["configuration_issues"] = config_issues
        logger.warning("Configuration issues found: %s", config_issues)

    return health_status
