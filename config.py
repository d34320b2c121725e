"""
Configuration for the Phonebook API.

``Settings`` reads its values from environment variables when this
module is imported.  Set variables such as ``PORT`` or ``STATIC_DIR``
before importing, or build a ``Settings`` instance by hand and pass it
to ``main.create_app``.

The front end in ``dist/`` is not part of the installed distribution.
Run the service from a checkout (``pip install -e .``), or point
``STATIC_DIR`` at a copy of the assets; otherwise only the API is served.
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "dist")


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Phonebook API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Directory holding the bundled front end.  Mounted at the site root
    # only if it exists.
    static_dir: str = os.getenv("STATIC_DIR", DEFAULT_STATIC_DIR)


settings = Settings()
