import os
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field

from ecsign.schemas import APP_STORE_CONNECT_AUDIENCE

# App Store Connect rejects tokens living longer than 20 minutes
MAX_TOKEN_LIFETIME = 20 * 60

class ECSignConfig(BaseModel):
    """Settings for issuing App Store Connect API tokens."""

    issuer_id: Optional[str] = None
    key_id: Optional[str] = None
    private_key_path: Optional[str] = None
    token_lifetime: int = Field(default=MAX_TOKEN_LIFETIME, ge=1, le=MAX_TOKEN_LIFETIME)
    audience: str = APP_STORE_CONNECT_AUDIENCE
    bundle_id: Optional[str] = None
    scope: Optional[List[str]] = None

_ENV_OVERRIDES = {
    "ECSIGN_ISSUER_ID": "issuer_id",
    "ECSIGN_KEY_ID": "key_id",
    "ECSIGN_PRIVATE_KEY_PATH": "private_key_path",
}

def load_config(path: Optional[str] = None) -> ECSignConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to ECSIGN_CONFIG env
            variable or 'ecsign.yaml' in the current directory.
    """

    config_path = path or os.getenv("ECSIGN_CONFIG", "ecsign.yaml")
    data = {}
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

    for env_name, field in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            data[field] = value
    return ECSignConfig(**data)
