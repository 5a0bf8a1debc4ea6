from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CLIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class ErrorInfo(CLIModel):
    type: str
    message: str
    details: dict[str, Any] | None = None


class ResponseData(CLIModel):
    status_code: int = Field(..., alias="statusCode")
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""


class CommandMeta(CLIModel):
    duration_ms: int = Field(..., alias="durationMs")
    method: str | None = None
    url: str | None = None


class CommandResult(CLIModel):
    ok: bool
    command: str
    data: Any | None = None
    warnings: list[str] = Field(default_factory=list)
    meta: CommandMeta
    error: ErrorInfo | None = None
