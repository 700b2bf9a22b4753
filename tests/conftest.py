from collections.abc import Generator
from pathlib import Path

import pytest

from gac.analysis import ChangeAnalysis, ChangeStats
from gac.config import Config

_ENV_VARS = [
    "OPENAI_API_KEY",
    "DASHSCOPE_API_KEY",
    "GAC_PROVIDER",
    "GAC_MODEL",
    "GAC_LLM_ENDPOINT",
    "GAC_LANGUAGE",
    "GAC_STYLE",
    "GAC_MAX_TOKENS",
    "GAC_TEMPERATURE",
    "GAC_LLM_REQUEST_TIMEOUT",
]


@pytest.fixture(autouse=True)
def isolated_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Ensure no persisted config interferes
    monkeypatch.setenv("GAC_CONFIG_HOME", str(tmp_path / ".gac"))
    yield


@pytest.fixture
def dashscope_config() -> Config:
    return Config(provider="dashscope", api_key="sk-dash", language="en")


@pytest.fixture
def openai_config() -> Config:
    return Config(
        provider="openai",
        model="gpt-3.5-turbo",
        api_key="sk-test",
        api_key_env="OPENAI_API_KEY",
        endpoint="https://api.openai.com/v1",
        language="en",
    )


@pytest.fixture
def analysis() -> ChangeAnalysis:
    return ChangeAnalysis(
        type="feat",
        scope="src",
        files=["src/a.py", "src/b.py"],
        stats=ChangeStats(files_changed=2, additions=3, deletions=1),
    )
