from fastapi import FastAPI

from intro.api.devices import router as devices_router
from intro.api.login import router as login_router
from intro.api.metrics import router as metrics_router
from intro.config import get_settings
from intro.models.schemas import HealthResponse
from intro.observability.metrics import get_metrics
from intro.observability.middleware import RequestContextMiddleware
from intro.services.device_service import get_device_registry


app = FastAPI(title="Intro Devices", version="0.1.0")
app.add_middleware(RequestContextMiddleware)
app.include_router(devices_router)
app.include_router(login_router)

# Served on its own listener so scrapes never share a port with device traffic.
metrics_app = FastAPI(title="Intro Devices Metrics", version="0.1.0", docs_url=None, redoc_url=None, openapi_url=None)
metrics_app.include_router(metrics_router)


@app.on_event("startup")
def _startup() -> None:
    settings = get_settings()
    metrics = get_metrics()
    metrics.publish_info(settings.app_version)
    metrics.set_device_count(len(get_device_registry()))


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok")
