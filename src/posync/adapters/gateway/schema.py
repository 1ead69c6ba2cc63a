"""Pydantic models for the graph endpoint's response envelope."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GatewayBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GraphError(GatewayBaseModel):
    model_config = ConfigDict(extra="allow")

    message: str = "Unknown error"


class GraphResponse(GatewayBaseModel):
    data: dict[str, Any] | None = None
    errors: list[GraphError] | None = None

    @property
    def first_error_message(self) -> str | None:
        if not self.errors:
            return None
        return self.errors[0].message


class LoginTokens(GatewayBaseModel):
    jwt_token: str | None = Field(default=None, alias="jwtToken")
    refresh_token: str | None = Field(default=None, alias="refreshToken")


class LoginData(GatewayBaseModel):
    login: LoginTokens | None = None
