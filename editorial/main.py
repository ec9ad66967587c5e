import logging
import time
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from editorial.core.config import settings
from editorial.core.errors import ErrorKind, GenerationError, default_message, new_debug_id
from editorial.routers import generate, health
from editorial.routers.generate import error_response
from editorial.services.generation.providers import GatewayProvider, LocalProvider, NullProvider, ProviderRegistry

app = FastAPI(title=settings.APP_NAME)

# CORS
origins = settings.cors_origin_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

prefix = settings.API_PREFIX
app.include_router(health.router, prefix=prefix)
app.include_router(generate.router, prefix=prefix)

# Model providers
ProviderRegistry.register("gateway", GatewayProvider())
ProviderRegistry.register("local", LocalProvider())
ProviderRegistry.register("disabled", NullProvider())

logger = logging.getLogger("app.requests")


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError):
    debug_id = new_debug_id("req")
    logger.info("[%s] %s %s rejected kind=%s", debug_id, request.method, request.url.path, exc.kind.value)
    return error_response(exc.kind, exc.message, debug_id, exc.retry_after)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    debug_id = new_debug_id("req")
    logger.info("[%s] %s %s invalid body errors=%s", debug_id, request.method, request.url.path, len(exc.errors()))
    return error_response(ErrorKind.INVALID_INPUT, default_message(ErrorKind.INVALID_INPUT), debug_id)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    debug_id = new_debug_id("req")
    logger.exception("[%s] %s %s unhandled error", debug_id, request.method, request.url.path)
    return error_response(ErrorKind.SERVER_ERROR, default_message(ErrorKind.SERVER_ERROR), debug_id)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, duration_ms)
    return response


@app.get("/")
async def root():
    return {"name": settings.APP_NAME, "env": settings.APP_ENV}
