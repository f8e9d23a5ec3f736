"""Pytest fixtures for nda-search tests."""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from nda_search.config import reset_config
from nda_search.config.schema import NDASearchConfig
from nda_search.search.models import Element
from nda_search.service.mock import MockDataDictionaryClient


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_config_fixture() -> Generator[None, None, None]:
    """Reset config singleton between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def isolated_paths(
    temp_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Keep config and history files out of the user's home directory."""
    monkeypatch.setenv("NDA_SEARCH_CONFIG", str(temp_dir / "config.toml"))
    monkeypatch.setenv("NDA_SEARCH_HISTORY_PATH", str(temp_dir / "history.duckdb"))
    for name in ("NDA_SEARCH_BASE_URL", "NDA_SEARCH_LOG_LEVEL", "NDA_SEARCH_NO_HISTORY"):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def default_config() -> NDASearchConfig:
    """Default configuration without pauses between batches."""
    config = NDASearchConfig()
    config.search.batch_pause_seconds = 0
    return config


@pytest.fixture
def config_file(temp_dir: Path) -> Path:
    """Create a test config file."""
    config_path = temp_dir / "config.toml"
    config_path.write_text("""
[service]
base_url = "https://example.org/api/datadictionary"
timeout = 5.0

[search]
batch_size = 10
batch_pause_seconds = 0
supplementary_categories = ["Imaging"]

[history]
max_entries = 5

[output]
default_format = "plain"
""")
    return config_path


@pytest.fixture
def subjectkey() -> Element:
    return Element(
        name="subjectkey",
        type="GUID",
        description="The NDAR Global Unique Identifier (GUID) for research subject",
        structures=("ndar_subject01",),
        position=1,
    )


@pytest.fixture
def catalog(subjectkey: Element) -> dict[str, list[Element]]:
    """A small data dictionary spread over three structures."""
    return {
        "ndar_subject01": [
            subjectkey,
            Element(
                name="interview_age",
                type="Integer",
                description="Age in months at the time of the interview",
                position=2,
            ),
            Element(
                name="sex",
                description="Sex of subject at birth",
                value_range="M;F;O;NR",
                position=3,
            ),
        ],
        "fingertap01": [
            Element(
                name="tap_count",
                type="Integer",
                description="Number of taps in the trial",
                position=1,
            ),
            Element(
                name="tapping_rate",
                type="Float",
                description="Rate of the finger tapping test",
                position=2,
            ),
        ],
        "demo02": [
            Element(
                name="interview_date",
                type="Date",
                description="Date on which the interview was conducted",
                position=1,
            ),
            Element(
                name="interview_age",
                type="Integer",
                description="Age in months at the time of the interview",
                position=2,
            ),
        ],
    }


@pytest.fixture
def mock_client(catalog: dict[str, list[Element]]) -> MockDataDictionaryClient:
    """Mock client whose keyword search returns every structure."""
    return MockDataDictionaryClient(
        catalog,
        titles={
            "ndar_subject01": "Research Subject and Pedigree",
            "fingertap01": "Finger Tapping Test",
            "demo02": "Demographics",
        },
        categories={"Imaging": ["demo02"], "Cognitive": ["fingertap01"]},
        search_results={
            term: list(catalog)
            for term in ("taps", "tap", "interview", "nonexistentzzz", "interview_age")
        },
    )
