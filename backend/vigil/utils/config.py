"""
Process-wide configuration loaded from environment variables.

Values are read once at import (after ``load_dotenv()``) and treated as
read-only for the lifetime of the process:

    from vigil.utils.config import config, EnvMode
    if config.ENV_MODE == EnvMode.PRODUCTION:
        ...
"""
import os
from enum import Enum
from typing import Optional, get_type_hints

from dotenv import load_dotenv

from vigil.utils.logger import logger

load_dotenv()

DEFAULT_PORTAL_RETURN_URL = "https://vigil.theintelligence.company/settings"


class EnvMode(Enum):
    LOCAL = "local"
    STAGING = "staging"
    PRODUCTION = "production"


class Configuration:
    ENV_MODE: Optional[EnvMode] = EnvMode.LOCAL

    # Stripe
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_WEBHOOK_SECRET: Optional[str] = None
    STRIPE_PORTAL_RETURN_URL: Optional[str] = None

    # Supabase
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    def __init__(self):
        env_mode_str = os.getenv("ENV_MODE", EnvMode.LOCAL.value)
        try:
            self.ENV_MODE = EnvMode(env_mode_str.lower())
        except ValueError:
            logger.warning(f"Invalid ENV_MODE: {env_mode_str}, defaulting to LOCAL")
            self.ENV_MODE = EnvMode.LOCAL

        self._load_from_env()

        # Frontend deployments expose the project URL under the Vite prefix
        if not self.SUPABASE_URL:
            self.SUPABASE_URL = os.getenv("VITE_SUPABASE_URL") or None

    def _load_from_env(self):
        for key, expected_type in get_type_hints(self.__class__).items():
            if key == "ENV_MODE":
                continue
            env_val = os.getenv(key)
            if env_val is None or env_val == "":
                continue
            if expected_type is bool:
                setattr(self, key, env_val.lower() in ("true", "t", "yes", "y", "1"))
            elif expected_type is int:
                setattr(self, key, int(env_val))
            else:
                setattr(self, key, env_val)

    @property
    def portal_return_url(self) -> str:
        """Return URL used when a portal request does not supply one."""
        return self.STRIPE_PORTAL_RETURN_URL or DEFAULT_PORTAL_RETURN_URL


config = Configuration()
