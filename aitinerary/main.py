import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aitinerary.api.routers.days import router as days_router
from aitinerary.api.routers.itineraries import router as itineraries_router
from aitinerary.api.routers.users import router as users_router
from aitinerary.core.csrf_middleware import CSRFProtectionMiddleware
from aitinerary.core.errors import RepositoryUnavailableError
from aitinerary.core.settings import get_settings

load_dotenv()

logger = logging.getLogger(__name__)

# Frontend dev servers (Vite and Create React App)
DEV_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:3000",
]


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    application = FastAPI(title="AI-tinerary Backend")

    # Add production origins from environment if set
    allowed_origins = DEV_ORIGINS + settings.extra_origins()

    # CSRF runs inside CORS so preflight requests are answered first
    application.add_middleware(CSRFProtectionMiddleware, allowed_origins=allowed_origins)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @application.exception_handler(RepositoryUnavailableError)
    async def repository_unavailable(request: Request, exc: RepositoryUnavailableError):
        logger.error(f"Database unavailable for {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)}
        )

    @application.get("/healthz", tags=["health"])
    def healthz():
        return {"status": "ok"}

    application.include_router(users_router)
    application.include_router(itineraries_router)
    application.include_router(days_router)
    return application


app = create_app()
