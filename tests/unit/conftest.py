import pytest
from pytest import MonkeyPatch

from safeshortener import service


@pytest.fixture(autouse=True)
def _fresh_memory_stores(monkeypatch: MonkeyPatch) -> None:
    """Every test starts with empty process-wide memory stores."""
    monkeypatch.setattr(service, '_MEMORY_STORES', {})
