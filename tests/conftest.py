from pathlib import Path

import pytest

from github_fakes import FakeSession, Sleeper
from stargazer_analyzer.models import PipelineConfig
from stargazer_analyzer.services.github_service import GitHubService


@pytest.fixture
def config(tmp_path: Path) -> PipelineConfig:
    return PipelineConfig(
        github_token="test-token",
        github_username="owner",
        repos=["A", "B"],
        cache_path=str(tmp_path / "cache.json"),
        output_path=str(tmp_path / "data" / "intelligence.json"),
        repo_delay=1.0,
        batch_delay=1.0,
        rate_limit_delay=15.0,
    )


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def github(config: PipelineConfig, session: FakeSession) -> GitHubService:
    return GitHubService(config, session=session)


@pytest.fixture
def sleeper() -> Sleeper:
    return Sleeper()
