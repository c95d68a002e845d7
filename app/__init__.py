import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Config
from app.db.database import init_db
from app.exceptions import (
    create_exception_handler,
    AdminTokenRequiredException,
    InvalidAdminTokenException,
)
from app.routers.admin import router as admin_router
from app.routers.categories import router as categories_router
from app.routers.repair_requests import router as repair_requests_router

load_dotenv()

logging.basicConfig(level=Config.LOG_LEVEL, format=Config.LOG_FORMAT)
logger = logging.getLogger(__name__)

swagger_docs_url = "/api/docs"
redoc_docs_url = "/api/redoc"
openapi_url = "/api/openapi.json"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("Database tables ready")
    yield


app = FastAPI(
    docs_url=swagger_docs_url,
    redoc_url=redoc_docs_url,
    openapi_url=openapi_url,
    title="Tekno API",
    description="Backend for an electronics storefront: category catalog and device repair tracking.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'],
    allow_headers=["*"],
)

# Register endpoints
app.include_router(categories_router, prefix='/api/categories', tags=["Categories"])
app.include_router(repair_requests_router, prefix='/api', tags=["Repairs"])
app.include_router(admin_router, prefix='/api/admin', tags=["Admin"])


# Add a root endpoint for health check
@app.get("/")
async def root():
    return {
        "message": "Tekno API",
        "version": "1.0.0",
        "docs": f"{Config.DOMAIN}{swagger_docs_url}",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# Register custom exceptions
app.add_exception_handler(AdminTokenRequiredException, create_exception_handler(401, "Admin authentication required!"))
app.add_exception_handler(InvalidAdminTokenException, create_exception_handler(403, "Invalid admin token provided!"))
