import sys
import os

import pytest

# Ensure repo root on sys.path for imports like `codrush...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

os.environ.setdefault("RAPID_API_URL", "https://judge0.example.test/submissions")
os.environ.setdefault("RAPID_API_HOST", "judge0.example.test")
os.environ.setdefault("RAPID_API_KEY", "test-key")

from judge0_fakes import FakeJudge0  # noqa: E402


@pytest.fixture
def fake_judge0():
    return FakeJudge0()
