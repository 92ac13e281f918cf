"""Root test configuration: isolate tests from a developer's MDSITE_* environment"""

import os

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop MDSITE_* env vars so each test starts from the Settings defaults."""
    for name in list(os.environ):
        if name.startswith("MDSITE_"):
            monkeypatch.delenv(name, raising=False)
