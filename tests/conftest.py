import os

import pytest

from tinycalc.config import reset_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in list(os.environ):
        if name.startswith("TINYCALC_"):
            monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
