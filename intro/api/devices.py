from __future__ import annotations

import re
from typing import TypeVar

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from intro.config import get_settings
from intro.models.schemas import Device, FirmwareUpgrade
from intro.observability.metrics import get_metrics
from intro.services.device_service import get_device_registry

router = APIRouter(tags=["devices"])

ModelT = TypeVar("ModelT", bound=BaseModel)

_DEVICE_ID_RE = re.compile(r"[+-]?[0-9]+")


async def _decode_body(request: Request, model: type[ModelT]) -> ModelT:
    # Any well-formed JSON object is accepted; missing fields take their defaults.
    try:
        payload = await request.json()
        return model.model_validate(payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/devices", response_model=list[Device])
async def get_devices() -> list[Device]:
    return get_device_registry().list_devices()


@router.post("/devices", status_code=201, response_class=PlainTextResponse)
async def create_device(request: Request) -> PlainTextResponse:
    device = await _decode_body(request, Device)

    registry = get_device_registry()
    registry.create_device(device)
    get_metrics().set_device_count(len(registry))
    return PlainTextResponse("Device created", status_code=201)


def _parse_device_id(raw: str) -> int:
    # ASCII digits with an optional sign; int() alone would also take "1_0", " 1" and non-ASCII digits.
    if not _DEVICE_ID_RE.fullmatch(raw):
        raise HTTPException(status_code=400, detail=f"Invalid device id: {raw!r}")
    return int(raw)


@router.put("/devices/", status_code=400, include_in_schema=False)
async def upgrade_device_without_id() -> None:
    _parse_device_id("")


@router.put("/devices/{device_id}", status_code=202, response_class=PlainTextResponse)
async def upgrade_device(device_id: str, request: Request) -> PlainTextResponse:
    target_id = _parse_device_id(device_id)

    upgrade = await _decode_body(request, FirmwareUpgrade)
    get_device_registry().upgrade_firmware(target_id, upgrade.firmware)
    get_metrics().record_upgrade(get_settings().device_type)
    return PlainTextResponse("Upgrading...", status_code=202)
