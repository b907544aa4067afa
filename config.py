import os
from pydantic import BaseModel
from typing import Mapping, Optional

GOVEE_API_URL = "https://openapi.api.govee.com/router/api/v1/device/control"
GOVEE_TIMEOUT = 30.0


class Secrets(BaseModel):
    """Values supplied by the hosting environment; they never change while the process runs."""
    govee_api_key: str = ""
    govee_api_url: str = GOVEE_API_URL
    govee_timeout: float = GOVEE_TIMEOUT

    token_nathan: Optional[str] = None
    token_girlfriend: Optional[str] = None
    token_daughter: Optional[str] = None
    token_mom: Optional[str] = None
    token_dad: Optional[str] = None
    token_admin: Optional[str] = None


def load_secrets(environ: Optional[Mapping[str, str]] = None) -> Secrets:
    """Read the secrets from environment variables (GOVEE_API_KEY, TOKEN_MOM, ...)."""
    if environ is None:
        environ = os.environ

    values = {}
    for field in Secrets.model_fields:
        raw = environ.get(field.upper())
        if raw:
            values[field] = raw
    return Secrets(**values)
