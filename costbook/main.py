from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from costbook.core.config import get_settings
from costbook.core.errors import CostbookError
from costbook.db.session import SessionLocal, init_db
from costbook.routers.health import router as health_router
from costbook.routers.ingredients import router as ingredients_router
from costbook.routers.recipes import router as recipes_router
from costbook.routers.recipe_ingredients import router as recipe_ingredients_router
from costbook.routers.steps import router as steps_router
from costbook.routers.reports import router as reports_router
from costbook.scripts.seed_demo import seed

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if settings.SEED_SAMPLE_DATA:
        with SessionLocal() as db:
            seed(db)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Recipe cost management API - ingredient pricing, recipe costing and profit margins.",
    version="0.1.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)


@app.exception_handler(CostbookError)
async def costbook_exception_handler(request: Request, exc: CostbookError):
    """Translate domain errors (not found, in use, bad step number) into client errors."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Global exception handler for unhandled errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected server errors with structured response."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later.",
            "request_id": request.headers.get("X-Request-ID"),
        }
    )

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(ingredients_router, prefix="/api")
app.include_router(recipes_router, prefix="/api")
app.include_router(recipe_ingredients_router, prefix="/api")
app.include_router(steps_router, prefix="/api")
app.include_router(reports_router, prefix="/api")


@app.get("/")
def read_root():
    return {
        "message": "Welcome to Costbook API",
        "docs": "/docs",
        "health": "/health"
    }
