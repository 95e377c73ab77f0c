"""Read-only diagram source backed by the projects/diagrams tables."""
from __future__ import annotations
import json
import logging
from sqlalchemy.orm import Session
from app.core.errors import ProjectNotFoundError
from app.db.models import Project
from app.generators.code_gen.types import DiagramRecord, DiagramType, GroupedDiagrams

log = logging.getLogger(__name__)

BUCKETS = {
    DiagramType.CLASS: "class_diagrams",
    DiagramType.USECASE: "usecase_diagrams",
    DiagramType.SEQUENCE: "sequence_diagrams",
    DiagramType.PACKAGE: "package_diagrams",
    DiagramType.COMPONENT: "component_diagrams",
}

class SqlDiagramSource:
    def __init__(self, db: Session):
        self.db = db

    def get_project_diagrams_grouped(self, project_id: int) -> GroupedDiagrams:
        project = self.db.get(Project, project_id)
        if not project:
            raise ProjectNotFoundError(project_id)

        grouped = GroupedDiagrams()
        for diagram in project.diagrams:
            try:
                diagram_type = DiagramType(diagram.type)
            except ValueError:
                log.warning("Ignoring diagram %s with unknown type %s", diagram.id, diagram.type)
                continue
            record = DiagramRecord(
                name=diagram.name,
                info=json.dumps(diagram.info_json),
                type=diagram_type,
            )
            getattr(grouped, BUCKETS[diagram_type]).append(record)
        return grouped
