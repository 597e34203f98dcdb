from __future__ import annotations

# Service origin resolution.
#
# One setting selects the origin for both REST and the push channel.
# Precedence:
#   1. explicit value (CLI `--api-base-url`)
#   2. CLINICQ_API_BASE_URL from the environment (or a `.env` file)
#   3. DEFAULT_BASE_URL

import os
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from .endpoints import DEFAULT_BASE_URL

API_BASE_URL_ENV = "CLINICQ_API_BASE_URL"


def load_env_file() -> None:
    """Load a `.env` file from the working directory, if any.

    Values already present in the environment win.
    """
    load_dotenv(find_dotenv(usecwd=True), override=False)


def resolve_base_url(explicit: str | None = None, environ: Mapping[str, str] | None = None) -> str:
    if explicit and explicit.strip():
        return explicit.strip().rstrip("/")

    env = os.environ if environ is None else environ
    value = env.get(API_BASE_URL_ENV, "").strip()
    if value:
        return value.rstrip("/")
    return DEFAULT_BASE_URL
