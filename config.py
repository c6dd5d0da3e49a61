"""Configuration for the fest administration backend."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(__file__).parent / 'fest.db'}",
)


def _parse_origins(value: str) -> list[str]:
    if not value:
        return ["*"]
    return [x.strip() for x in value.split(",") if x.strip()]


def _parse_policy(value: str) -> str:
    value = (value or "").strip().lower()
    if value not in ("reuse", "reject"):
        return "reuse"
    return value


# Web auth (JWT secret, initial developer bootstrap)
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production-use-long-random-string")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", "1"))
INITIAL_DEVELOPER_EMAIL = os.getenv("INITIAL_DEVELOPER_EMAIL", "dev@fest.local")
INITIAL_DEVELOPER_PASSWORD = os.getenv("INITIAL_DEVELOPER_PASSWORD", "")  # Set to bootstrap first developer
INITIAL_DEVELOPER_NAME = os.getenv("INITIAL_DEVELOPER_NAME", "Developer")

# What to do when an existing account is reused for a different role: "reuse" keeps
# the account and its original role, "reject" refuses the provisioning call.
ROLE_REUSE_POLICY = _parse_policy(os.getenv("ROLE_REUSE_POLICY", "reuse"))

# API server
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
CORS_ORIGINS = _parse_origins(os.getenv("CORS_ORIGINS", ""))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
