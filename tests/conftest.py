"""Pytest configuration for tests."""

from pathlib import Path

import pytest

from agent_standards.config import Settings


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


@pytest.fixture
def profiles_root(tmp_path) -> Path:
    root = tmp_path / "profiles"
    root.mkdir()
    return root


@pytest.fixture
def settings(profiles_root) -> Settings:
    return Settings(profiles_root=profiles_root)


@pytest.fixture
def make_profile(profiles_root):
    """Build a profile directory: ``make_profile("android", {"testing/a.md": "..."})``."""

    def _make(name, standards=None, config=None):
        root = profiles_root / name
        root.mkdir(parents=True, exist_ok=True)
        for relative, text in (standards or {}).items():
            path = root / "standards" / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        if config is not None:
            (root / "profile-config.yml").write_text(config, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def android_tree(make_profile):
    """The default/android pair used throughout the resolver tests."""
    make_profile(
        "default",
        {
            "global/coding-style.md": "default style",
            "testing/ui-testing.md": "default ui testing",
            "testing/unit-testing.md": "default unit testing",
            "frontend/components.md": "default components",
        },
    )
    make_profile(
        "android",
        {
            "frontend/components.md": "android composables",
            "testing/compose-testing.md": "android compose testing",
        },
        config="parent: default\n",
    )
