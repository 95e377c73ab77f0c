import logging
import uuid
from pathlib import Path
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.engine import CodeGenerator, DiagramSource, GenerationEngine
from app.core.errors import GenerationError, ProjectNotFoundError
from app.core.gemini import GeminiClient
from app.db.diagram_source import SqlDiagramSource
from app.db.session import get_db

log = logging.getLogger(__name__)

router = APIRouter(prefix="/generation")

def get_diagram_source(db: Session = Depends(get_db)) -> DiagramSource:
    return SqlDiagramSource(db)

def get_code_generator() -> CodeGenerator:
    return GeminiClient()

def get_output_dir() -> Path:
    return Path(settings.output_dir)

@router.get("/project/{project_id}", response_class=Response)
async def generate_project(
    project_id: int,
    source: DiagramSource = Depends(get_diagram_source),
    llm: CodeGenerator = Depends(get_code_generator),
    output_dir: Path = Depends(get_output_dir),
):
    run_id = str(uuid.uuid4())
    engine = GenerationEngine(source=source, llm=llm, output_root=output_dir / run_id, run_id=run_id)
    try:
        result = await engine.run(project_id)
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except GenerationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if result.warnings:
        log.warning("Generated project %s with %d skipped diagrams", project_id, len(result.warnings),
                    extra={"run_id": engine.run_id, "stage": "DONE"})

    return Response(
        content=result.archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="project-{project_id}.zip"'},
    )
