from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from app.config import get_settings
from app.database import engine, Base
from app.api import products, products_graphql, health
from app.api.errors import register_exception_handlers

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up application...")

    # Create database tables
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

    yield

    # Shutdown
    logger.info("Shutting down application...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    CRUD service for products, exposed over REST and GraphQL.

    - **REST**: `/api/v1/products`
    - **GraphQL**: `/graphql`

    ## Rules

    - Product names must be unique when a product is created.
    - New products are always ACTIVE; updates may set any status.
    - Deleting a product sets its status to DELETED. The record is kept
      and can still be retrieved by id.

    ## Errors

    Failing REST calls return `{"message": ..., "fieldErrors": {...}}`.
    """,
    version=settings.APP_VERSION,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT"
    },
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(products.router, prefix="/api/v1")
app.include_router(products_graphql.router, prefix=settings.GRAPHQL_PATH, tags=["GraphQL"])


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "graphql": settings.GRAPHQL_PATH,
        "health": "/api/v1/health"
    }
