from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from enterprise_crm.api.errors import entity_not_found_handler, invalid_credentials_handler
from enterprise_crm.api.routes import router as api_router
from enterprise_crm.core.config import get_settings
from enterprise_crm.errors import EntityNotFoundError, InvalidCredentialsError
from enterprise_crm.logging import configure_logging
from enterprise_crm.middleware.correlation_id import CorrelationIdMiddleware
from enterprise_crm.middleware.request_logging import RequestLoggingMiddleware
from enterprise_crm.otel import server_request_hook, setup_otel


settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("enterprise_crm.lifecycle")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("app.started")
    yield
    logger.info("app.stopped")


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_exception_handler(EntityNotFoundError, entity_not_found_handler)  # type: ignore[arg-type]
app.add_exception_handler(InvalidCredentialsError, invalid_credentials_handler)  # type: ignore[arg-type]
app.include_router(api_router)

setup_otel(settings)
if not getattr(app, "_is_instrumented_by_opentelemetry", False):
    FastAPIInstrumentor().instrument_app(app, server_request_hook=server_request_hook)
