"""
Authentication Pydantic schemas
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Token(BaseModel):
    """Login response"""
    model_config = ConfigDict(populate_by_name=True)

    message: str = "Login successful!"
    token: str
    refresh_token: str = Field(..., serialization_alias="refreshToken")


class RefreshTokenRequest(BaseModel):
    """Refresh token request"""
    refresh_token: str = Field(
        "",
        validation_alias=AliasChoices("refresh_token", "refreshToken"),
    )


class AccessTokenResponse(BaseModel):
    """Refreshed access token"""
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., serialization_alias="accessToken")
