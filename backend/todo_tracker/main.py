import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import DEFAULT_JWT_SECRET, Settings, get_settings
from .database import build_engine, build_session_factory, init_db
from .errors import InternalError, TodoTrackerError
from .log import configure_logging
from .routes import todos, users

logger = logging.getLogger(__name__)


def _error_response(exc: TodoTrackerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TodoTrackerError)
    async def app_error_handler(request: Request, exc: TodoTrackerError) -> JSONResponse:
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": jsonable_errors(exc)},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception(f"Database failure on {request.method} {request.url.path}")
        return _error_response(InternalError())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error_response(InternalError("Internal server error"))


def jsonable_errors(exc: RequestValidationError) -> list:
    # drop pydantic's "ctx"/"input" entries, they may hold raw exceptions or passwords
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set, tokens are signed with the built-in development key")

    engine = build_engine(settings.database_url)
    init_db(engine)

    app = FastAPI(title="Todo Tracker API")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_error_handlers(app)

    app.include_router(users.router)
    app.include_router(todos.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    logger.info(f"Todo Tracker API ready, store={engine.url.render_as_string(hide_password=True)}")
    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(prog="todo-api", description="Serve the Todo Tracker API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    args = parser.parse_args()

    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    run()
