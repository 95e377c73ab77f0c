"""Tests for the end-to-end generation pipeline with fake collaborators."""
import asyncio
import io
import json
import tempfile
import threading
import zipfile
from pathlib import Path
import pytest
from app.core.engine import GenerationEngine
from app.core.errors import LLMInvocationError, LLMTimeoutError, ProjectNotFoundError
from app.core.workflow import GenerationStage
from app.generators.code_gen.types import DiagramRecord, GroupedDiagrams


CLASS_DIAGRAM = {
    "nodeDataArray": [{"key": 1, "name": "Usuario", "properties": ["- id: Int", "+ nombre: String"]}],
    "linkDataArray": [],
}

LLM_RESPONSE = """```typescript
// entities/usuario.entity.ts
import { Entity } from 'typeorm';

@Entity()
export class Usuario {}
```

```typescript
// app/components/usuario/usuario.component.ts
import { Component } from '@angular/core';

@Component({ selector: 'app-usuario', template: '' })
export class UsuarioComponent {}
```
"""


class FakeSource:
    def __init__(self, grouped=None):
        self.grouped = grouped
        self.calls = []
        self.threads = []

    def get_project_diagrams_grouped(self, project_id):
        self.calls.append(project_id)
        self.threads.append(threading.get_ident())
        if self.grouped is None:
            raise ProjectNotFoundError(project_id)
        return self.grouped


class FakeLLM:
    def __init__(self, response=LLM_RESPONSE, delay=0.0, error=None):
        self.response = response
        self.delay = delay
        self.error = error
        self.prompts = []

    async def generate_code(self, prompt):
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.response


def _grouped():
    return GroupedDiagrams(
        class_diagrams=[DiagramRecord(name="Modelo", info=json.dumps(CLASS_DIAGRAM))],
        usecase_diagrams=[DiagramRecord(name="Roto", info="{broken")],
    )


@pytest.mark.asyncio
async def test_run_produces_archive_and_cleans_up():
    with tempfile.TemporaryDirectory() as temp_dir:
        output_root = Path(temp_dir) / "run-1"
        llm = FakeLLM()
        engine = GenerationEngine(FakeSource(_grouped()), llm, output_root=output_root, run_id="run-1",
                                  keep_output=False)

        result = await engine.run(42)

        assert engine.stage == GenerationStage.DONE
        assert "Usuario" in llm.prompts[0]
        assert [f.relative_path for f in result.files] == [
            "entities/usuario.entity.ts",
            "app/components/usuario/usuario.component.ts",
        ]
        assert [w.diagram_name for w in result.warnings] == ["Roto"]
        assert result.build.files_written == 2

        with zipfile.ZipFile(io.BytesIO(result.archive)) as archive:
            names = archive.namelist()
        assert "backend/src/entities/usuario.entity.ts" in names
        assert "frontend/src/app/components/usuario/usuario.component.ts" in names
        assert "README.md" in names

        assert not output_root.exists()


@pytest.mark.asyncio
async def test_keep_output_leaves_tree_on_disk():
    with tempfile.TemporaryDirectory() as temp_dir:
        output_root = Path(temp_dir) / "run-2"
        engine = GenerationEngine(FakeSource(_grouped()), FakeLLM(), output_root=output_root, keep_output=True)

        await engine.run(1)

        assert (output_root / "backend/src/entities/usuario.entity.ts").exists()


@pytest.mark.asyncio
async def test_unknown_project_touches_nothing():
    """An unknown project fails before the LLM is called or the filesystem is touched."""
    with tempfile.TemporaryDirectory() as temp_dir:
        output_root = Path(temp_dir) / "run-3"
        llm = FakeLLM()
        engine = GenerationEngine(FakeSource(None), llm, output_root=output_root)

        with pytest.raises(ProjectNotFoundError) as exc_info:
            await engine.run(99)

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Project with ID 99 not found"
        assert llm.prompts == []
        assert engine.stage == GenerationStage.FAILED
        assert list(Path(temp_dir).iterdir()) == []


@pytest.mark.asyncio
async def test_llm_timeout():
    with tempfile.TemporaryDirectory() as temp_dir:
        output_root = Path(temp_dir) / "run-4"
        engine = GenerationEngine(FakeSource(_grouped()), FakeLLM(delay=1.0), output_root=output_root,
                                  llm_timeout=0.01)

        with pytest.raises(LLMTimeoutError):
            await engine.run(1)
        assert not output_root.exists()


@pytest.mark.asyncio
async def test_empty_llm_response_fails():
    with tempfile.TemporaryDirectory() as temp_dir:
        engine = GenerationEngine(FakeSource(_grouped()), FakeLLM(response="   "),
                                  output_root=Path(temp_dir) / "run-5")

        with pytest.raises(LLMInvocationError):
            await engine.run(1)


@pytest.mark.asyncio
async def test_unexpected_llm_error_is_wrapped():
    with tempfile.TemporaryDirectory() as temp_dir:
        engine = GenerationEngine(FakeSource(_grouped()), FakeLLM(error=RuntimeError("socket closed")),
                                  output_root=Path(temp_dir) / "run-6")

        with pytest.raises(LLMInvocationError) as exc_info:
            await engine.run(1)
        assert "socket closed" in exc_info.value.message


@pytest.mark.asyncio
async def test_response_without_code_blocks_still_packages():
    with tempfile.TemporaryDirectory() as temp_dir:
        engine = GenerationEngine(FakeSource(GroupedDiagrams()), FakeLLM(response="Sorry, nothing to generate."),
                                  output_root=Path(temp_dir) / "run-7")

        result = await engine.run(1)

        assert result.files == []
        with zipfile.ZipFile(io.BytesIO(result.archive)) as archive:
            assert "backend/package.json" in archive.namelist()


@pytest.mark.asyncio
async def test_unknown_project_keeps_existing_output_root():
    """A caller-supplied root that already holds files survives a not-found run untouched."""
    with tempfile.TemporaryDirectory() as temp_dir:
        output_root = Path(temp_dir) / "existing"
        output_root.mkdir()
        (output_root / "previous.txt").write_text("keep me", encoding="utf-8")
        engine = GenerationEngine(FakeSource(None), FakeLLM(), output_root=output_root, keep_output=False)

        with pytest.raises(ProjectNotFoundError):
            await engine.run(99)

        assert (output_root / "previous.txt").read_text(encoding="utf-8") == "keep me"


@pytest.mark.asyncio
async def test_llm_failure_keeps_existing_output_root():
    with tempfile.TemporaryDirectory() as temp_dir:
        output_root = Path(temp_dir) / "existing"
        output_root.mkdir()
        (output_root / "previous.txt").write_text("keep me", encoding="utf-8")
        engine = GenerationEngine(FakeSource(_grouped()), FakeLLM(error=RuntimeError("down")),
                                  output_root=output_root)

        with pytest.raises(LLMInvocationError):
            await engine.run(1)

        assert (output_root / "previous.txt").exists()


@pytest.mark.asyncio
async def test_diagram_fetch_runs_off_the_event_loop():
    """The blocking diagram lookup runs in a worker thread, not on the loop's thread."""
    with tempfile.TemporaryDirectory() as temp_dir:
        source = FakeSource(_grouped())
        engine = GenerationEngine(source, FakeLLM(), output_root=Path(temp_dir) / "run-8")

        await engine.run(1)

        assert source.calls == [1]
        assert source.threads[0] != threading.get_ident()
