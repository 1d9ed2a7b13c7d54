"""
Root pytest configuration.
Ensures environment variables are loaded BEFORE any module imports.
This must be in the root directory to load before tests are collected.
"""

import os
import pytest
from dotenv import load_dotenv

# Load environment variables IMMEDIATELY before any other imports
load_dotenv()

# Tests build their own Settings; keep a local token from leaking into defaults
os.environ.pop("SCRAPER_TOKEN", None)

if not os.getenv("LOG_LEVEL"):
    os.environ["LOG_LEVEL"] = "WARNING"


@pytest.fixture(autouse=True)
def fresh_settings():
    """
    Drop cached settings so each test reads the environment it sets up.
    """
    from src.core.utils.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
