"""Tests for the SQLAlchemy-backed diagram source."""
import json
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.core.errors import ProjectNotFoundError
from app.db.diagram_source import SqlDiagramSource
from app.db.models import Diagram, Project
from app.db.session import Base
from app.generators.code_gen.types import DiagramType


@pytest.fixture
def db():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def test_diagrams_grouped_by_type_in_retrieval_order(db):
    project = Project(name="Tienda")
    project.diagrams = [
        Diagram(name="Clases", type=1, info_json={"nodeDataArray": [{"key": 1, "name": "Usuario"}]}),
        Diagram(name="Casos", type=2, info_json={"nodes": []}),
        Diagram(name="Mas clases", type=1, info_json={"nodes": []}),
        Diagram(name="Componentes", type=5, info_json=None),
        Diagram(name="Desconocido", type=9, info_json={}),
    ]
    db.add(project)
    db.commit()

    grouped = SqlDiagramSource(db).get_project_diagrams_grouped(project.id)

    assert [d.name for d in grouped.class_diagrams] == ["Clases", "Mas clases"]
    assert [d.name for d in grouped.usecase_diagrams] == ["Casos"]
    assert [d.name for d in grouped.component_diagrams] == ["Componentes"]
    assert grouped.package_diagrams == []
    assert grouped.sequence_diagrams == []
    assert grouped.total() == 4

    first = grouped.class_diagrams[0]
    assert first.type == DiagramType.CLASS
    assert json.loads(first.info) == {"nodeDataArray": [{"key": 1, "name": "Usuario"}]}
    assert json.loads(grouped.component_diagrams[0].info) is None


def test_project_without_diagrams(db):
    project = Project(name="Vacio")
    db.add(project)
    db.commit()

    grouped = SqlDiagramSource(db).get_project_diagrams_grouped(project.id)

    assert grouped.total() == 0


def test_unknown_project(db):
    with pytest.raises(ProjectNotFoundError):
        SqlDiagramSource(db).get_project_diagrams_grouped(12345)
