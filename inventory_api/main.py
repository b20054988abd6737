# inventory_api/main.py

"""
FastAPI Inventory API.
Manages products (create, list, retrieve, replace, delete), reports
aggregate stock statistics, and serves the single-page front end for
every path outside /api.
"""
import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .bootstrap import BootstrapError, ensure_schema
from .db import build_engine, build_session_factory, get_db
from .repository import ProductRepository
from .schemas import (
    ErrorResponse,
    MessageResponse,
    ProductCreate,
    ProductCreated,
    ProductResponse,
    ProductUpdate,
    StatsResponse,
)

# -----------------------------
# Configure Logging
# -----------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Suppress noisy logs from third-party libraries for cleaner output
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)

API_PREFIX = "/api"
STATIC_DIR = Path(os.getenv("STATIC_DIR", Path(__file__).parent / "static"))

PRODUCT_NOT_FOUND = "Product not found"

# Error bodies documented in the OpenAPI schema.
ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def get_repository(db: Session = Depends(get_db)) -> ProductRepository:
    """Dependency that binds a ProductRepository to the request's session."""
    return ProductRepository(db)


# -----------------------------
# API Endpoints
# -----------------------------
router = APIRouter(prefix=API_PREFIX)


@router.get("/health", status_code=status.HTTP_200_OK, summary="Health check endpoint")
async def health_check():
    """
    A simple health check endpoint to verify the service is running.
    """
    return {"status": "ok", "service": "inventory-api"}


@router.get(
    "/products",
    response_model=List[ProductResponse],
    summary="List all products, newest first",
    responses=ERROR_RESPONSES,
)
def list_products(repo: ProductRepository = Depends(get_repository)):
    logger.info("Listing products")
    try:
        products = repo.list_products()
    except Exception as e:
        logger.error(f"Error listing products: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not retrieve products.",
        )
    logger.info(f"Retrieved {len(products)} products.")
    return products


@router.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    summary="Retrieve a product by ID",
    responses=ERROR_RESPONSES,
)
def get_product(product_id: int, repo: ProductRepository = Depends(get_repository)):
    """
    Retrieves details of a single product by its unique ID.

    - Raises a 404 HTTP exception if the product does not exist.
    """
    logger.info(f"Fetching product with ID: {product_id}")
    try:
        product = repo.get_product(product_id)
    except Exception as e:
        logger.error(f"Error fetching product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not retrieve product.",
        )
    if product is None:
        logger.warning(f"Product with ID: {product_id} not found.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    return product


@router.post(
    "/products",
    response_model=ProductCreated,
    summary="Create a new product",
    responses=ERROR_RESPONSES,
)
def create_product(product: ProductCreate, repo: ProductRepository = Depends(get_repository)):
    """
    Creates a new product entry in the database.

    - `name`, `category`, `quantity` and `price` are required; `description` is optional.
    - Returns the auto-generated `id` of the new product.
    """
    logger.info(f"Creating product: {product.name}")
    try:
        product_id = repo.create_product(product)
    except Exception as e:
        logger.error(f"Error creating product: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create product.",
        )
    logger.info(f"Product '{product.name}' (ID: {product_id}) created successfully.")
    return ProductCreated(id=product_id, message="Product created successfully")


@router.put(
    "/products/{product_id}",
    response_model=MessageResponse,
    summary="Replace an existing product",
    responses=ERROR_RESPONSES,
)
def update_product(
    product_id: int,
    updated: ProductUpdate,
    repo: ProductRepository = Depends(get_repository),
):
    """
    Replaces every editable field of an existing product and refreshes
    its `updated_at` timestamp. `created_at` is left untouched.

    - Raises a 404 HTTP exception if the product does not exist.
    """
    logger.info(f"Updating product with ID: {product_id} with data: {updated.model_dump()}")
    try:
        found = repo.update_product(product_id, updated)
    except Exception as e:
        logger.error(f"Error updating product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update product.",
        )
    if not found:
        logger.warning(f"Product with ID: {product_id} not found for update.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    logger.info(f"Product (ID: {product_id}) updated successfully.")
    return MessageResponse(message="Product updated successfully")


@router.delete(
    "/products/{product_id}",
    response_model=MessageResponse,
    summary="Delete a product by ID",
    responses=ERROR_RESPONSES,
)
def delete_product(product_id: int, repo: ProductRepository = Depends(get_repository)):
    logger.info(f"Attempting to delete product with ID: {product_id}")
    try:
        found = repo.delete_product(product_id)
    except Exception as e:
        logger.error(f"Error deleting product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while deleting the product.",
        )
    if not found:
        logger.warning(f"Product with ID: {product_id} not found for deletion.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    logger.info(f"Product (ID: {product_id}) deleted successfully.")
    return MessageResponse(message="Product deleted successfully")


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Aggregate stock statistics",
    responses=ERROR_RESPONSES,
)
def get_stats(repo: ProductRepository = Depends(get_repository)):
    """
    Returns the product count, total units in stock, number of distinct
    categories and total stock value. All zero for an empty inventory.
    """
    try:
        stats = repo.get_stats()
    except Exception as e:
        logger.error(f"Error computing stats: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not compute statistics.",
        )
    return stats


# -----------------------------
# Error Handlers
# -----------------------------
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reports malformed requests as 400 with a single error message."""
    errors = exc.errors()
    missing = [err["loc"] for err in errors if err["type"] == "missing"]
    if missing:
        fields = [str(loc[-1]) for loc in missing if len(loc) > 1]
        message = "Missing required fields"
        if fields:
            message += ": " + ", ".join(fields)
    elif any(err["type"] == "json_invalid" for err in errors):
        message = "Invalid JSON body"
    else:
        message = f"Invalid value for field '{errors[0]['loc'][-1]}'"
    logger.warning(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Last resort for errors raised outside the endpoints' own handling.
    Runs outside the middleware stack, so the cache header is set here.
    """
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
        headers={"Cache-Control": "no-store"},
    )


# -----------------------------
# Static Front End
# -----------------------------
def resolve_static_path(static_dir: Path, relative_path: str) -> Path:
    """
    Maps a request path to a file in the static directory.
    Anything that is not an existing file inside it resolves to index.html.
    """
    root = static_dir.resolve()
    if relative_path:
        candidate = (root / relative_path).resolve()
        if candidate.is_relative_to(root) and candidate.is_file():
            return candidate
    return root / "index.html"


def build_spa_fallback(static_dir: Path):
    api_root = API_PREFIX.lstrip("/")

    async def spa_fallback(request: Request, full_path: str):
        # Unknown API routes never fall through to the front end.
        if full_path == api_root or full_path.startswith(api_root + "/"):
            if full_path.endswith("/") and full_path.rstrip("/") != api_root:
                # Same as FastAPI's redirect_slashes, which the catch-all route disables.
                url = request.url.replace(path=request.url.path.rstrip("/"))
                return RedirectResponse(str(url), status_code=status.HTTP_307_TEMPORARY_REDIRECT)
            return Response(status_code=status.HTTP_404_NOT_FOUND)
        return FileResponse(resolve_static_path(static_dir, full_path))

    return spa_fallback


async def disable_caching(request: Request, call_next):
    """Every response tells the client not to store it."""
    response = await call_next(request)
    response.headers["Cache-Control"] = "no-store"
    for header in ("etag", "last-modified"):
        if header in response.headers:
            del response.headers[header]
    return response


# -----------------------------
# Application Factory
# -----------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Ensures the schema and seed data exist before serving traffic, and
    drains the connection pool on shutdown.
    Any bootstrap failure aborts startup and uvicorn exits the process;
    there is no retry.
    """
    engine: Engine = app.state.engine
    try:
        logger.info("Bootstrapping database schema...")
        ensure_schema(engine)
        logger.info("Database ready.")
    except Exception as e:
        logger.critical(
            f"Database bootstrap failed: {e}. Exiting application.",
            exc_info=True,
        )
        raise BootstrapError("Could not initialize the products table.") from e
    yield
    logger.info("Closing database connection pool.")
    engine.dispose()


def create_app(engine: Optional[Engine] = None, static_dir: Path = STATIC_DIR) -> FastAPI:
    """
    Builds the application around the given engine.
    Without one, an engine for the configured PostgreSQL database is created.
    """
    if engine is None:
        engine = build_engine()

    app = FastAPI(
        title="Inventory API",
        description="Manages products and stock statistics",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # Enable CORS (for frontend dev/testing)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Use specific origins in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(disable_caching)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(router)
    # Registered last so every API route is tried first.
    app.add_api_route(
        "/{full_path:path}",
        build_spa_fallback(static_dir),
        methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        include_in_schema=False,
    )
    return app


app = create_app()
