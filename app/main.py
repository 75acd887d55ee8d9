from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import structlog
import uvicorn

from config import DEBUG, APP_HOST, APP_PORT
from database.init import Base, engine
import database.models  # noqa: F401  registers every table on Base.metadata
from responses.error import bad_request_error, error_response, internal_server_error
from routes import (
    auth_routes,
    hotel_routes,
    room_routes,
    booking_routes,
    payment_routes,
    package_routes,
)
from utils.exceptions import AppError
from utils.logger import configure_logging

configure_logging()
logger = structlog.get_logger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Tourism API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    return error_response(exc.status_code, exc.message, exc.errors)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return bad_request_error("Validation failed", errors)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("unhandled_exception", path=request.url.path, exc_info=exc)
    return internal_server_error(str(exc) if DEBUG else "Internal server error")


app.include_router(auth_routes.router)
app.include_router(hotel_routes.router)
app.include_router(room_routes.hotel_rooms_router)
app.include_router(room_routes.router)
app.include_router(booking_routes.router)
app.include_router(payment_routes.router)
app.include_router(package_routes.router)


@app.get("/")
def read_root():
    return {"name": "Tourism API", "version": "1.0.0"}


if __name__ == "__main__":
    uvicorn.run("main:app", host=APP_HOST, port=APP_PORT, reload=DEBUG)
