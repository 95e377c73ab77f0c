"""Tests for prompt assembly."""
from app.generators.code_gen.prompt import build_prompt, render_format_rules
from app.generators.code_gen.types import ContextEntry, GenerationContext


def _context():
    return GenerationContext(
        entities=[ContextEntry(name="OrderItem", body="id: int (primary) - private\nqty: int (nullable) - public")],
        controllers=[ContextEntry(name="Cliente", body="POST /cliente - Crear pedido: Crear pedido")],
    )


def test_prompt_lists_every_artifact_section():
    prompt = build_prompt(_context(), "Shop")

    assert '"Shop"' in prompt
    for heading in ("1. TypeORM entities", "2. DTOs", "3. Injectable services",
                    "4. REST controllers", "5. NestJS modules", "6. The bootstrap files", "7. For every entity"):
        assert heading in prompt
    assert "app.module.ts" in prompt
    assert "main.ts" in prompt


def test_prompt_renders_context_entries():
    prompt = build_prompt(_context(), "Shop")

    assert "   - OrderItem" in prompt
    assert "       qty: int (nullable) - public" in prompt
    assert "       POST /cliente - Crear pedido: Crear pedido" in prompt
    assert "(no services found in the diagrams)" in prompt
    assert "(no modules found in the diagrams)" in prompt


def test_examples_use_path_comment_format():
    """Every example block starts with a path comment keyed on the first entity."""
    prompt = build_prompt(_context(), "Shop")

    assert "```typescript\n// entities/order-item.entity.ts\n" in prompt
    assert "// controllers/order-item.controller.ts" in prompt
    assert "// app/components/order-item/order-item.component.ts" in prompt
    assert render_format_rules() in prompt


def test_empty_context_still_produces_prompt():
    prompt = build_prompt(GenerationContext(), "Empty")

    assert "(no entities found in the diagrams)" in prompt
    assert "// entities/user.entity.ts" in prompt
    assert prompt.endswith("\n")
