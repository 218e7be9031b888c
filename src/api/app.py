from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


def error_body(status_label: str, code: str, message: str) -> dict:
    return {"status": status_label, "code": code, "message": message}


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error on {request.url.path}: {error_dict}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("fail", exc.base_error.code, exc.base_error.message),
    )


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(
        f"Server error on {request.url.path}: {exc.base_error.code} - {exc.base_error.message}"
    )
    message = exc.base_error.message if exc.expose_message else "Internal server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("error", exc.base_error.code, message),
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid input for {field}: {first.get('msg')}" if field else "Invalid input"
    logger.warning(f"Request validation failed on {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("fail", "VALIDATION_ERROR", message),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("error", "INTERNAL_ERROR", "Internal server error"),
    )


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Session Auth API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import auth, health_check, user

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(user.router, tags=["User"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
