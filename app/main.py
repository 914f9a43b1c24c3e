from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import logging

# Import database components
from app.database.database import Database

# Import middleware
from app.common.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from app.common.exceptions import NotFoundError, StoreFailure, ValidationError

# Import routers
from app.modules.contacts.router import clients_router, suppliers_router
from app.modules.invoices.router import invoices_router
from app.modules.purchase_orders.router import purchase_orders_router
from app.modules.taxes.router import taxes_router
from app.modules.reports.routers import dashboard_router

# Import models for table creation
import app.modules.contacts.models
import app.modules.invoices.models
import app.modules.purchase_orders.models

from app.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Traducir errores de dominio a respuestas HTTP"""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message, "errors": exc.errors}
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": exc.message}
        )

    @app.exception_handler(StoreFailure)
    async def store_failure_handler(request: Request, exc: StoreFailure):
        logger.error(f"Store failure on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Base de datos no disponible"}
        )


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Construir la aplicación

    La conexión a la base de datos se crea aquí (o se recibe ya construida)
    y vive en app.state mientras viva la aplicación.
    """
    settings = settings or default_settings
    database = database or Database(settings.database_url)

    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Gestión Comercial API starting up...")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Debug mode: {settings.DEBUG}")

        # Create database tables (only for development)
        if settings.ENVIRONMENT == "development":
            database.create_all()

        yield

        logger.info("Gestión Comercial API shutting down...")
        database.dispose()

    app = FastAPI(
        title="Gestión Comercial API",
        description="Clientes, proveedores, facturas y órdenes de compra (Argentina)",
        version="1.0.0",
        docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = database

    # Add middleware (order matters!)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(SecurityHeadersMiddleware, production=settings.ENVIRONMENT == "production")
    app.add_middleware(RequestLoggingMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(clients_router)
    app.include_router(suppliers_router)
    app.include_router(invoices_router)
    app.include_router(purchase_orders_router)
    app.include_router(taxes_router)
    app.include_router(dashboard_router)

    @app.get("/")
    async def read_root():
        return {
            "message": "Gestión Comercial API is running",
            "version": "1.0.0",
            "environment": settings.ENVIRONMENT
        }

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "environment": settings.ENVIRONMENT}

    return app


app = create_app()
