from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from api import create_app
from config import AppConfig, GeminiConfig, UploadConfig
from tests.fakes import FakeLLMService, FakeTranscriptionService


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def app_config(upload_dir: Path) -> AppConfig:
    return AppConfig(
        gemini=GeminiConfig(api_key="test-key"),
        upload=UploadConfig(temp_dir=upload_dir),
    )


@pytest.fixture
def transcriber() -> FakeTranscriptionService:
    return FakeTranscriptionService()


@pytest.fixture
def llm() -> FakeLLMService:
    return FakeLLMService()


@pytest.fixture
def client(app_config, transcriber, llm) -> TestClient:
    return TestClient(create_app(app_config, transcriber, llm))
