"""Root test configuration: isolated working directory and settings"""

import os

import pytest

from mdsite.config import Settings


@pytest.fixture(autouse=True)
def isolate_env(tmp_path, monkeypatch):
    """Run each test from a clean tmp directory with no MDSITE_* env vars leaking in."""
    for name in list(os.environ):
        if name.startswith("MDSITE_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(name="settings")
def settings_fixture(tmp_path):
    """Settings pointing content/output at tmp_path, served under /blog."""
    return Settings(
        site_title="Test Site",
        site_description="Tests & more",
        site_url="https://example.org/blog",
        author="Test Author",
        base_path="/blog",
        content_dir=str(tmp_path / "content"),
        output_dir=str(tmp_path / "site"),
    )
