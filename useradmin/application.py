"""Application factory wired from configuration files and the environment."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI

from .config import load_settings
from .web import create_app


def create_application(*, config_path: Optional[str] = None) -> FastAPI:
    """Create the ASGI application from ``USERADMIN_*`` settings.

    Suitable for ``uvicorn useradmin.application:create_application --factory``.
    """

    raw_path = config_path or os.getenv("USERADMIN_CONFIG")
    settings = load_settings(Path(raw_path).expanduser() if raw_path else None)
    return create_app(settings=settings)


__all__ = ["create_application"]
