from __future__ import annotations

from pydantic import BaseModel


class Device(BaseModel):
    id: int = 0
    mac: str = ""
    firmware: str = ""


class FirmwareUpgrade(BaseModel):
    firmware: str = ""


class HealthResponse(BaseModel):
    status: str
