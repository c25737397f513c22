"""Typed option models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class HttpFacadeModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class ProxyDescriptor(HttpFacadeModel):
    type: Literal["http", "https", "socks4", "socks5"]
    hostname: StrictStr
    port: int = Field(ge=0, le=65535)

    @field_validator("port", mode="before")
    @classmethod
    def _coerce_port(cls, value: Any) -> Any:
        # bool is an int subclass; a flag is never a port.
        if isinstance(value, bool):
            raise ValueError("port must be numeric")
        if isinstance(value, str):
            value = value.strip()
            try:
                numeric = float(value)
            except ValueError:
                return value
            if numeric.is_integer():
                return int(numeric)
        return value

    @property
    def url(self) -> str:
        host = f"[{self.hostname}]" if ":" in self.hostname else self.hostname
        return f"{self.type}://{host}:{self.port}"
