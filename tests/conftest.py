from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


def read_fixture(*parts: str) -> str:
    text = FIXTURES.joinpath(*parts).read_text(encoding="utf-8")
    return text.replace("\r\n", "\n")


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES
