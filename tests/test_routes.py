"""Tests for the HTTP surface with overridden dependencies."""
import io
import tempfile
import zipfile
from pathlib import Path
import pytest
from fastapi.testclient import TestClient
from app.api.routes_generation import get_code_generator, get_diagram_source, get_output_dir
from app.core.errors import LLMInvocationError, LLMTimeoutError, ProjectNotFoundError
from app.generators.code_gen.types import GroupedDiagrams
from app.main import app


class StubSource:
    def __init__(self, known=True):
        self.known = known

    def get_project_diagrams_grouped(self, project_id):
        if not self.known:
            raise ProjectNotFoundError(project_id)
        return GroupedDiagrams()


class StubLLM:
    def __init__(self, response="```ts\n// main.ts\nbootstrap();\n```", error=None):
        self.response = response
        self.error = error

    async def generate_code(self, prompt):
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def client():
    with tempfile.TemporaryDirectory() as temp_dir:
        app.dependency_overrides[get_output_dir] = lambda: Path(temp_dir)
        try:
            yield TestClient(app)
        finally:
            app.dependency_overrides.clear()


def _override(source, llm):
    app.dependency_overrides[get_diagram_source] = lambda: source
    app.dependency_overrides[get_code_generator] = lambda: llm


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_generate_project_returns_zip(client):
    _override(StubSource(), StubLLM())

    response = client.get("/generation/project/7")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert response.headers["content-disposition"] == 'attachment; filename="project-7.zip"'
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        assert "backend/src/main.ts" in archive.namelist()


def test_unknown_project_is_404(client):
    _override(StubSource(known=False), StubLLM())

    response = client.get("/generation/project/99")

    assert response.status_code == 404
    assert response.json() == {"detail": "Project with ID 99 not found"}


def test_llm_failure_is_502(client):
    _override(StubSource(), StubLLM(error=LLMInvocationError("Gemini returned HTTP 500")))

    response = client.get("/generation/project/1")

    assert response.status_code == 502


def test_llm_timeout_is_504(client):
    _override(StubSource(), StubLLM(error=LLMTimeoutError("timed out")))

    response = client.get("/generation/project/1")

    assert response.status_code == 504


def test_non_integer_project_id_is_rejected(client):
    _override(StubSource(), StubLLM())

    response = client.get("/generation/project/abc")

    assert response.status_code == 422
