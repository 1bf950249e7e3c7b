"""
Runtime configuration for the Schedulo backend.

All values come from the environment (optionally a .env file) and are
collected once into a Settings object that is passed to the app factory
and the auth service.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    jwt_secret: str
    database_url: str
    port: int = 3000
    token_expiration_minutes: int = 60

    # argon2 work factors
    password_time_cost: int = 3
    password_memory_cost: int = 65536
    password_parallelism: int = 4

    # mail transport
    email_host: str = "smtp.gmail.com"
    email_port: int = 587
    email_user: Optional[str] = None
    email_pass: Optional[str] = None
    email_from: Optional[str] = None
    mail_in_background: bool = False
    debug: bool = False

    frontend_url: str = "http://localhost:4200"
    cors_origins: List[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            RuntimeError: If JWT_SECRET or DATABASE_URL is missing.
        """
        load_dotenv()

        jwt_secret = os.getenv("JWT_SECRET")
        if not jwt_secret:
            raise RuntimeError("JWT_SECRET is missing. Set it in .env")

        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            raise RuntimeError("DATABASE_URL is not set. Please set the environment variable.")

        frontend_url = os.getenv("FRONTEND_URL", "http://localhost:4200").rstrip("/")
        origins = os.getenv("CORS_ORIGINS")
        cors_origins = [o.strip() for o in origins.split(",") if o.strip()] if origins else [frontend_url]

        email_user = os.getenv("EMAIL_USER")

        return cls(
            jwt_secret=jwt_secret,
            database_url=database_url,
            port=int(os.getenv("PORT", 3000)),
            token_expiration_minutes=int(os.getenv("TOKEN_EXPIRATION_MINUTES", 60)),
            password_time_cost=int(os.getenv("PASSWORD_TIME_COST", 3)),
            password_memory_cost=int(os.getenv("PASSWORD_MEMORY_COST", 65536)),
            password_parallelism=int(os.getenv("PASSWORD_PARALLELISM", 4)),
            email_host=os.getenv("EMAIL_HOST", "smtp.gmail.com"),
            email_port=int(os.getenv("EMAIL_PORT", 587)),
            email_user=email_user,
            email_pass=os.getenv("EMAIL_PASS"),
            email_from=os.getenv("EMAIL_FROM", email_user),
            mail_in_background=_env_bool("MAIL_IN_BACKGROUND"),
            debug=_env_bool("DEBUG"),
            frontend_url=frontend_url,
            cors_origins=cors_origins,
        )
