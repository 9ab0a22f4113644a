from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.proto_builder import ProtoBuilder


@pytest.fixture
def proto_builder(tmp_path: Path) -> ProtoBuilder:
    """Provide a reusable schema builder rooted at the pytest tmp_path."""
    return ProtoBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's settings file out of the tests."""
    monkeypatch.delenv("PROTOC_GEN_DOC_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop handlers installed by the CLI so they never outlive a captured stream."""
    yield
    logger = logging.getLogger("protoc_gen_doc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
