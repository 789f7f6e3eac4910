"""
Data models for Shopify app credentials and OAuth token responses.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from shopify_oauth.integrations.shopify.exceptions import DecodeError


@dataclass(frozen=True)
class App:
    """
    Shopify app credentials.

    SECURITY: api_secret is the shared HMAC key. It is only ever sent in the
    token exchange body and is excluded from repr so it never reaches logs.
    """

    api_key: str
    api_secret: str = field(repr=False)
    redirect_url: str = ""
    scope: str = ""


class Token(BaseModel):
    """Access token returned by the authorization code exchange."""

    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    access_token: str
    scope: str

    @classmethod
    def from_dict(cls, data: Any) -> "Token":
        """
        Build a Token from a decoded JSON response.

        Raises:
            DecodeError: If the payload is not an object with string
                access_token and scope fields
        """
        if not isinstance(data, dict):
            raise DecodeError(f"Token response is not an object: {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            raise DecodeError(f"Token response missing or invalid fields: {', '.join(fields)}") from e
