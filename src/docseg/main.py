from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from docseg.api.chunks import router as chunks_router
from docseg.logging_config import configure_logging

configure_logging()

app = FastAPI(title="Document Segmentation API")
app.include_router(chunks_router)


@app.get("/", response_class=PlainTextResponse)
def read_root() -> str:
    """Healthcheck endpoint for the service."""
    return "ok"
