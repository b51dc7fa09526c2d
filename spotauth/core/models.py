from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class ClientCredentials:
    """
    Provider-issued application identifiers.

    The secret is excluded from repr so credentials can appear in log
    messages and tracebacks without leaking it.
    """

    client_id: str
    client_secret: str = field(repr=False)


@dataclass(frozen=True)
class RedirectTarget:
    """
    Redirect URI registered with the provider and the requested scope.

    - uri   : loopback URL the local listener binds to (host + port)
    - scope : space-delimited permission list, e.g. "user-top-read"
    """

    uri: str
    scope: str


class TokenSet(BaseModel):
    """
    Token endpoint response.

    - access_token  : bearer credential, never empty
    - token_type    : "Bearer" for Spotify (defaulted when omitted)
    - expires_in    : seconds from issuance, not an absolute timestamp
    - refresh_token : may be empty in a refresh response; the refresher
                      carries the previous one forward
    - scope         : granted scope, when the provider echoes it
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(min_length=1)
    token_type: str = "Bearer"
    expires_in: int = Field(ge=0)
    refresh_token: str = ""
    scope: Optional[str] = None

    def with_refresh_token(self, refresh_token: str) -> "TokenSet":
        return self.model_copy(update={"refresh_token": refresh_token})
