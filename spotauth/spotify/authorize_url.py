from typing import Dict, Optional
from urllib.parse import quote, urlencode

from spotauth.config import SPOTIFY_AUTH_URL


def build_authorize_url(
    client_id: str,
    redirect_uri: str,
    scope: str,
    *,
    authorize_url: str = SPOTIFY_AUTH_URL,
    state: Optional[str] = None,
    show_dialog: bool = False,
) -> str:
    """
    Build the provider authorization URL the user opens in a browser.

    Every value is percent-encoded (spaces become %20, "/" and ":" are
    escaped), so parsing the query string back gives the exact redirect_uri
    and scope that were passed in.
    """
    params: Dict[str, str] = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "scope": scope,
    }
    if state:
        params["state"] = state
    if show_dialog:
        params["show_dialog"] = "true"

    return f"{authorize_url}?{urlencode(params, quote_via=quote)}"
