# models/system_configuration.py
from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SystemConfiguration(BaseModel):
    """A named machine configuration activity records are tagged with (by list index)."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, alias="Name")
    os: Optional[str] = Field(None, alias="Os")
    cpu: Optional[str] = Field(None, alias="Cpu")
    gpu_name: Optional[str] = Field(None, alias="GpuName")
    ram: Optional[str] = Field(None, alias="Ram")
