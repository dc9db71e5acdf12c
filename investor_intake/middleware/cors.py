"""CORS middleware configuration"""
from fastapi.middleware.cors import CORSMiddleware
from investor_intake.config import get_settings


def setup_cors(app):
    """
    Configure permissive CORS for the public form endpoints

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )
