from typing import List, Literal, Optional
from pydantic import BaseModel, Field, model_validator

# Regex Patterns
# 64 raw signature bytes -> 86 base64url chars, no padding
SIG_PATTERN = r"^[A-Za-z0-9_-]{86}$"
KID_PATTERN = r"^[A-Za-z0-9._-]+$"

APP_STORE_CONNECT_AUDIENCE = "appstoreconnect-v1"

class TokenHeader(BaseModel, extra="forbid"):
    alg: Literal["ES256"] = "ES256"
    kid: str = Field(pattern=KID_PATTERN)
    typ: Optional[Literal["JWT"]] = "JWT"

class AppStoreConnectClaims(BaseModel, extra="forbid"):
    iss: str = Field(min_length=1)
    iat: int = Field(ge=0)
    exp: int = Field(ge=0)
    aud: str = APP_STORE_CONNECT_AUDIENCE
    bid: Optional[str] = None
    scope: Optional[List[str]] = None

    @model_validator(mode="after")
    def _exp_after_iat(self):
        if self.exp <= self.iat:
            raise ValueError("exp must be later than iat")
        return self
