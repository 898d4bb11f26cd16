import logging
from datetime import date
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .database import DatabaseClient
from .dependencies import get_db
from .exceptions import StorageError
from .models import ErrorResponse
from .routers.extraction import SCAN_INVOICE_PATH, preflight_response
from .routers.extraction import router as extraction_router
from .routers.invoices import router as invoices_router

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

STATIC_DIR = Path(__file__).parent / "static"

app = FastAPI(
    title="Invoice Tracker API",
    description="Invoice listing, editing and export with AI-assisted data entry",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Registered after CORSMiddleware so it runs first.
@app.middleware("http")
async def scan_invoice_preflight(request: Request, call_next):
    if request.method == "OPTIONS" and request.url.path == SCAN_INVOICE_PATH:
        return preflight_response(request)
    return await call_next(request)


app.mount("/static", StaticFiles(directory=STATIC_DIR, html=True), name="static")

app.include_router(invoices_router)
app.include_router(extraction_router)


@app.get("/", include_in_schema=False)
def index():
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/api/health")
async def health_check(db: DatabaseClient = Depends(get_db)):
    """Health check with database connectivity"""
    try:
        invoices = db.fetch_all()
    except StorageError as e:
        raise HTTPException(
            status_code=503,
            detail=f"Service unavailable: {str(e)}"
        )
    return {
        "status": "healthy",
        "database": "connected",
        "total_invoices": len(invoices),
        "timestamp": date.today().isoformat()
    }


# Error handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            success=False,
            error=str(exc.detail),
            details=f"Status Code: {exc.status_code}"
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    logging.getLogger(__name__).exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            success=False,
            error="Internal server error",
            details=str(exc)
        ).model_dump()
    )
