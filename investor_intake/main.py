"""Main FastAPI application"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from investor_intake.config import get_settings
from investor_intake.middleware.cors import setup_cors
from investor_intake.middleware.error_handler import ErrorHandlerMiddleware
from contextlib import asynccontextmanager
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
# httpx logs request URLs at INFO, and the Bot API URL embeds the token
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    settings = get_settings()
    if not settings.telegram_configured:
        # Not fatal at start-up; every dispatch fails until configured
        logger.warning("Telegram is not configured, submissions will fail")
    yield


app = FastAPI(
    title="Investor Intake API",
    description="Investment form intake and Telegram relay",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Setup CORS
setup_cors(app)

# Add error handling middleware
app.add_middleware(ErrorHandlerMiddleware)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed or non-object bodies get the same envelope as field errors"""
    logger.info(f"Rejected request body on {request.url.path}: {[e.get('type') for e in exc.errors()]}")
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": "Request body must be a JSON object"}
    )


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "investor-intake",
        "telegram": "configured" if get_settings().telegram_configured else "missing"
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Investor Intake API",
        "version": "1.0.0",
        "docs": "/docs"
    }

# Import and include routers
from investor_intake.routers import submissions

app.include_router(submissions.router, prefix="/api/submissions", tags=["Submissions"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
