"""
Module principal de l'application FastAPI SearchGear.

Configure le logging, CORS, les gestionnaires d'erreurs (enveloppe
`{"success": false, "message": ...}`), construit le transport email une seule
fois au démarrage et inclut les routeurs de l'API.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from searchgear import __version__
from searchgear.auth.router import auth_router
from searchgear.bookings.router import bookings_router
from searchgear.config import settings
from searchgear.core.exceptions import SearchGearException
from searchgear.core.schemas import BUSINESS_RULE_ERROR, ErrorResponse
from searchgear.database import create_tables
from searchgear.email.config import settings as email_settings
from searchgear.email.dependencies import build_email_sender
from searchgear.quotes.router import quotes_router

# Configurer le logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MSG = "Please provide all required fields"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Démarrage de {settings.APP_NAME} ({settings.ENVIRONMENT})")
    await create_tables()
    app.state.email_sender = build_email_sender(email_settings)
    yield
    logger.info(f"Arrêt de {settings.APP_NAME}")


app = FastAPI(
    title=settings.APP_NAME,
    description="API de gestion des demandes de devis, cotations et réservations de bus.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ======================================================
# Gestionnaires d'erreurs
# ======================================================
def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    body = ErrorResponse(message=message).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(SearchGearException)
async def domain_exception_handler(request: Request, exc: SearchGearException):
    logger.warning(f"Erreur métier non traduite sur {request.url.path}: {exc.message}")
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = REQUIRED_FIELDS_MSG
    if errors:
        first = errors[0]
        if first.get("type") == BUSINESS_RULE_ERROR:
            message = str(first.get("msg"))
        elif first.get("type") != "missing":
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    logger.info(f"Requête invalide sur {request.url.path}: {message}")
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Erreur inattendue sur {request.method} {request.url.path}: {exc}", exc_info=exc)
    message = settings.GENERIC_ERROR_MSG if settings.is_production else f"{settings.GENERIC_ERROR_MSG} ({type(exc).__name__})"
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


# ======================================================
# Inclure les routeurs
# ======================================================
app.include_router(auth_router, prefix=f"{settings.API_V1_PREFIX}/auth", tags=["Authentification"])
app.include_router(quotes_router, prefix=f"{settings.API_V1_PREFIX}/quotes", tags=["Quotes"])
app.include_router(bookings_router, prefix=f"{settings.API_V1_PREFIX}/bookings", tags=["Bookings"])


@app.get("/api/health", tags=["Health"])
async def health_check():
    return {"success": True, "message": f"{settings.APP_NAME} is running", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("searchgear.main:app", host="0.0.0.0", port=8000, reload=not settings.is_production)
