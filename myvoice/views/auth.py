"""Schemas for owner authentication."""

from pydantic import BaseModel, Field


class OwnerLoginRequest(BaseModel):
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str = Field(serialization_alias="accessToken")
    token_type: str = Field(default="bearer", serialization_alias="tokenType")
    expires_in: int = Field(
        default=0,
        serialization_alias="expiresIn",
        description="Seconds until the token expires",
    )


class OwnerSessionResponse(BaseModel):
    owner: bool = True
