import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'foundry'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from foundry.core.config import FoundryConfig  # noqa: E402
from foundry.core.registry import Registry  # noqa: E402
from helpers.models import Comment, Post, User  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_foundry_env(monkeypatch):
    """Developer shells must not leak FOUNDRY_* overrides into tests."""
    for key in list(os.environ):
        if key.startswith("FOUNDRY_"):
            monkeypatch.delenv(key, raising=False)
    User.saved.clear()
    Post.saved.clear()
    Comment.saved.clear()
    yield


@pytest.fixture
def config() -> FoundryConfig:
    return FoundryConfig.defaults()


@pytest.fixture
def registry(config: FoundryConfig) -> Registry:
    """Empty registry with bundled defaults and the sample models registered."""
    reg = Registry(config)
    reg.register_class(User)
    reg.register_class(Post)
    reg.register_class(Comment)
    return reg
