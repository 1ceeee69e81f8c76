from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.config import settings
from framework.database.manager import get_db
from framework.response import ResponseModel
from framework.middleware.logging_md import LoggingMiddleware
from framework.logging.logger import LogConfig
from framework.exceptions.handler import BusinessException, global_exception_handler
from apps.identity.api.router import router as identity_router
from apps.companies.api.router import router as company_router
from apps.reviews.api.router import router as review_router
from apps.placements.api.router import router as placement_router
from apps.moderation.api.router import router as moderation_router

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Initialize logging configuration
LogConfig.setup_logging()

# Register global exception handlers
app.add_exception_handler(BusinessException, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(LoggingMiddleware)
# Session cookie is sent cross-origin by the SPA
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers (prefix from config for easy override per deployment)
app.include_router(
    identity_router,
    prefix=settings.API_V1_AUTH_PREFIX,
    tags=["Identity"]
)

app.include_router(
    company_router,
    prefix=settings.API_V1_COMPANIES_PREFIX,
    tags=["Companies"]
)

app.include_router(
    review_router,
    prefix=settings.API_V1_REVIEWS_PREFIX,
    tags=["Reviews"]
)

app.include_router(
    placement_router,
    prefix=settings.API_V1_PLACEMENTS_PREFIX,
    tags=["Placements"]
)

app.include_router(
    moderation_router,
    prefix=settings.API_V1_ADMIN_PREFIX,
    tags=["Moderation"]
)


@app.get("/health", tags=["Health"])
async def health(db: AsyncSession = Depends(get_db)):
    """Liveness plus a database round trip."""
    await db.execute(text("SELECT 1"))
    return ResponseModel.success(data={"status": "ok", "app": settings.APP_NAME})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
