from urllib.parse import urlparse

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from app.api.exception_handlers import ExceptionFilter, register_exception_handlers
from app.api.v1.router import api_router
from app.core.config import settings
from app.core.logging import log_requests, setup_logging

setup_logging(settings.log_level, settings.log_format)

app = FastAPI()

if settings.frontend_url:
    parsed = urlparse(settings.frontend_url)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app, ExceptionFilter(verbose_errors=settings.verbose_errors))
# Outermost, so failures answered by the filter still get a request line
app.middleware("http")(log_requests)
app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
def health():
    return {"status": "ok"}
