from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from spa_booking.core.config import settings
from spa_booking.core.errors import ServiceError
from spa_booking.api import bookings, testimonials
from spa_booking.core.logger import setup_logging, logger
from spa_booking.services.booking_service import BookingStore
from spa_booking.services.notification_service import build_notifier
from spa_booking.services.storage_service import JsonFileRepository
from spa_booking.services.testimonial_service import TestimonialStore
from contextlib import asynccontextmanager
from datetime import datetime
from zoneinfo import ZoneInfo

setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting Spa Booking Service")
    tz = ZoneInfo(settings.TIMEZONE)
    notifier = build_notifier(settings, tz)
    if not notifier.configured:
        logger.warning("⚠️ Telegram credentials missing, booking alerts will be skipped.")

    app.state.booking_store = BookingStore(JsonFileRepository(settings.BOOKINGS_FILE), notifier, tz)
    app.state.testimonial_store = TestimonialStore(JsonFileRepository(settings.TESTIMONIALS_FILE))
    yield
    # Shutdown
    await app.state.booking_store.drain()
    logger.info("🛑 Shutting down backend")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"🔥 {request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request.", "detail": jsonable_encoder(exc.errors())}
    )

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"🔥 UNHANDLED ERROR: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "detail": "An unexpected error occurred. Please contact support."}
    )

# Include routers
app.include_router(bookings.router, tags=["Bookings"])
app.include_router(testimonials.router, prefix="/api", tags=["Testimonials"])

@app.get("/health")
async def health_check():
    return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("spa_booking.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
