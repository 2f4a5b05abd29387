import logging
from contextlib import asynccontextmanager

from catalog.core.config import settings

uvicorn_logger = logging.getLogger("uvicorn")

app_logger = logging.getLogger("catalog")
app_logger.setLevel(settings.LOG_LEVEL)
if uvicorn_logger.handlers:
    app_logger.handlers = uvicorn_logger.handlers
    app_logger.propagate = False

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from catalog.core.api_client import catalog_client
from catalog.core.errors import FieldValidationError, FormValidationError, RemoteError
from catalog.api.v1.auth import router as auth_router
from catalog.api.v1.forms import router as forms_router
from catalog.api.v1.products import router as products_router
from catalog.api.v1.uploads import router as uploads_router

logger = logging.getLogger(__name__)
logger.info("Application startup - logging configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await catalog_client.close()


app = FastAPI(
    title=settings.APP_NAME,
    description="Product catalog manager with gallery, dashboard and form state",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

app.add_middleware(SessionMiddleware, secret_key=settings.SESSION_SECRET_KEY)

app.include_router(auth_router)
app.include_router(forms_router)
app.include_router(products_router)
app.include_router(uploads_router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors()},
    )


@app.exception_handler(FormValidationError)
async def form_validation_handler(request: Request, exc: FormValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.message, "errors": exc.errors},
    )


@app.exception_handler(FieldValidationError)
async def field_validation_handler(request: Request, exc: FieldValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "errors": {exc.field: exc.message}},
    )


@app.exception_handler(RemoteError)
async def remote_error_handler(request: Request, exc: RemoteError):
    status_code = exc.status_code or status.HTTP_502_BAD_GATEWAY
    if status_code < 400:
        status_code = status.HTTP_502_BAD_GATEWAY
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        request.session.clear()
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
