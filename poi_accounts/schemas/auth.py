"""Request/response schemas for sign-in."""

from pydantic import BaseModel, Field


class SignInRequest(BaseModel):
    """Credentials for sign-in."""

    email: str = Field(..., min_length=3, max_length=255, description="Account email")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class TokenResponse(BaseModel):
    """
    Result of a sign-in attempt.

    access_token is null when the credentials were not accepted; the response does not
    say whether the email or the password was wrong.
    """

    access_token: str | None = Field(default=None, description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
