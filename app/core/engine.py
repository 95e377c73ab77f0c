from __future__ import annotations
import asyncio
import logging
import shutil
import uuid
from pathlib import Path
from typing import Protocol
from app.core.config import settings
from app.core.errors import GenerationError, LLMInvocationError, LLMTimeoutError
from app.core.workflow import GenerationStage
from app.generators.code_gen.archive import ArchivePackager
from app.generators.code_gen.context import aggregate
from app.generators.code_gen.output_parser import parse_output
from app.generators.code_gen.prompt import build_prompt
from app.generators.code_gen.types import GenerationResult, GroupedDiagrams
from app.generators.code_gen.writer import ProjectBuilder

log = logging.getLogger(__name__)


class DiagramSource(Protocol):
    def get_project_diagrams_grouped(self, project_id: int) -> GroupedDiagrams:
        """Raises ProjectNotFoundError for unknown projects."""
        ...


class CodeGenerator(Protocol):
    async def generate_code(self, prompt: str) -> str:
        ...


class GenerationEngine:
    """Runs the diagram-to-archive pipeline for one request, stage by stage."""

    def __init__(
        self,
        source: DiagramSource,
        llm: CodeGenerator,
        output_root: Path | None = None,
        run_id: str | None = None,
        project_name: str = settings.project_name,
        llm_timeout: float = settings.llm_timeout_seconds,
        keep_output: bool = settings.keep_output,
    ):
        self.source = source
        self.llm = llm
        self.run_id = run_id or str(uuid.uuid4())
        # One isolated root per run so concurrent requests never share a reset target
        self.output_root = Path(output_root) if output_root else Path(settings.output_dir) / self.run_id
        self.project_name = project_name
        self.llm_timeout = llm_timeout
        self.keep_output = keep_output
        self.stage = GenerationStage.FETCH_DIAGRAMS
        self._built = False

    def _set_stage(self, stage: GenerationStage) -> None:
        self.stage = stage
        log.info("Running stage", extra={"run_id": self.run_id, "stage": stage.value})

    async def _invoke_llm(self, prompt: str) -> str:
        try:
            response = await asyncio.wait_for(self.llm.generate_code(prompt), timeout=self.llm_timeout)
        except asyncio.TimeoutError as e:
            raise LLMTimeoutError(f"LLM invocation timed out after {self.llm_timeout}s") from e
        except GenerationError:
            raise
        except Exception as e:
            raise LLMInvocationError(f"LLM invocation failed: {e}") from e

        if not isinstance(response, str) or not response.strip():
            raise LLMInvocationError("Empty response from LLM")
        return response

    async def run(self, project_id: int) -> GenerationResult:
        """
        Generate the project archive for ``project_id``.

        Diagram-level parse failures are collected as warnings; every other
        failure propagates and no archive is returned.
        """
        self._built = False
        try:
            self._set_stage(GenerationStage.FETCH_DIAGRAMS)
            grouped = await asyncio.to_thread(self.source.get_project_diagrams_grouped, project_id)
            log.info(
                "Found diagrams: class=%d usecase=%d component=%d package=%d sequence=%d",
                len(grouped.class_diagrams), len(grouped.usecase_diagrams), len(grouped.component_diagrams),
                len(grouped.package_diagrams), len(grouped.sequence_diagrams),
                extra={"run_id": self.run_id, "stage": self.stage.value},
            )

            self._set_stage(GenerationStage.AGGREGATE_CONTEXT)
            context = aggregate(grouped, run_id=self.run_id)

            self._set_stage(GenerationStage.ASSEMBLE_PROMPT)
            prompt = build_prompt(context, self.project_name)

            self._set_stage(GenerationStage.INVOKE_LLM)
            response = await self._invoke_llm(prompt)

            self._set_stage(GenerationStage.PARSE_OUTPUT)
            files = parse_output(response)

            self._set_stage(GenerationStage.BUILD_PROJECT)
            builder = ProjectBuilder(self.output_root, run_id=self.run_id)
            # Cleanup applies only once the builder has reset the root
            self._built = True
            build = await asyncio.to_thread(builder.write_files, files)

            self._set_stage(GenerationStage.PACKAGE_ARCHIVE)
            packager = ArchivePackager(self.output_root, run_id=self.run_id)
            archive = await asyncio.to_thread(packager.package)

            self._set_stage(GenerationStage.DONE)
            return GenerationResult(archive=archive, files=files, warnings=context.warnings, build=build)

        except GenerationError as e:
            log.error("Stage failed: %s", e.message, extra={"run_id": self.run_id, "stage": self.stage.value})
            self.stage = GenerationStage.FAILED
            raise
        except Exception:
            log.exception("Generation failed", extra={"run_id": self.run_id, "stage": self.stage.value})
            self.stage = GenerationStage.FAILED
            raise
        finally:
            if self._built and not self.keep_output:
                shutil.rmtree(self.output_root, ignore_errors=True)
