"""Render a GenerationContext into the LLM prompt (simple string templates)."""
from typing import List
from app.generators.code_gen.types import ContextEntry, GenerationContext
from app.generators.code_gen.utils import to_kebab_case

BOOTSTRAP_FILES = ("app.module.ts", "main.ts")

FENCE = "```"


def _render_entries(entries: List[ContextEntry], kind: str) -> List[str]:
    if not entries:
        return [f"   (no {kind} found in the diagrams)"]
    lines = []
    for entry in entries:
        lines.append(f"   - {entry.name}")
        for body_line in entry.body.splitlines():
            if body_line.strip():
                lines.append(f"       {body_line}")
    return lines


def render_role(project_name: str) -> str:
    return (
        "You are a senior full-stack developer who writes NestJS (TypeORM) backends "
        "and Angular frontends.\n"
        f"Generate the source code of the project \"{project_name}\" from the UML "
        "model summarized below."
    )


def render_artifacts(ctx: GenerationContext) -> str:
    lines = ["Generate the following artifacts:", ""]
    lines.append("1. TypeORM entities (one file per entity, with @Entity, @PrimaryGeneratedColumn, @Column and relation decorators):")
    lines.extend(_render_entries(ctx.entities, "entities"))
    lines.append("")
    lines.append("2. DTOs with class-validator decorators:")
    lines.extend(_render_entries(ctx.dtos, "DTOs"))
    lines.append("")
    lines.append("3. Injectable services holding the business logic:")
    lines.extend(_render_entries(ctx.services, "services"))
    lines.append("")
    lines.append("4. REST controllers that inject the corresponding service:")
    lines.extend(_render_entries(ctx.controllers, "controllers"))
    lines.append("")
    lines.append("5. NestJS modules wiring controllers, services and entities together:")
    lines.extend(_render_entries(ctx.modules, "modules"))
    lines.append("")
    lines.append(f"6. The bootstrap files {BOOTSTRAP_FILES[0]} (root module importing every module) "
                 f"and {BOOTSTRAP_FILES[1]} (NestFactory bootstrap listening on port 3000).")
    lines.append("")
    lines.append("7. For every entity, an Angular standalone component listing its records under "
                 "app/components/<name>/ and a TypeScript interface under app/models/.")
    return "\n".join(lines)


def render_examples(ctx: GenerationContext) -> str:
    """One worked example per artifact kind, showing the exact block format."""
    sample = ctx.entities[0].name if ctx.entities else "User"
    slug = to_kebab_case(sample)
    examples = [
        ("Entity", "typescript", f"entities/{slug}.entity.ts",
         f"import {{ Entity, PrimaryGeneratedColumn, Column }} from 'typeorm';\n\n"
         f"@Entity()\nexport class {sample} {{\n  @PrimaryGeneratedColumn()\n  id: number;\n\n"
         f"  @Column({{ nullable: true }})\n  name: string;\n}}"),
        ("DTO", "typescript", f"dto/create-{slug}.dto.ts",
         f"import {{ IsString }} from 'class-validator';\n\n"
         f"export class Create{sample}Dto {{\n  @IsString()\n  name: string;\n}}"),
        ("Service", "typescript", f"services/{slug}.service.ts",
         f"import {{ Injectable }} from '@nestjs/common';\n\n"
         f"@Injectable()\nexport class {sample}Service {{\n  findAll() {{\n    return [];\n  }}\n}}"),
        ("Controller", "typescript", f"controllers/{slug}.controller.ts",
         f"import {{ Controller, Get }} from '@nestjs/common';\n"
         f"import {{ {sample}Service }} from '../services/{slug}.service';\n\n"
         f"@Controller('{slug}')\nexport class {sample}Controller {{\n"
         f"  constructor(private readonly service: {sample}Service) {{}}\n\n"
         f"  @Get()\n  findAll() {{\n    return this.service.findAll();\n  }}\n}}"),
        ("Module", "typescript", f"modules/{slug}.module.ts",
         f"import {{ Module }} from '@nestjs/common';\n\n"
         f"@Module({{ controllers: [], providers: [] }})\nexport class {sample}Module {{}}"),
        ("Angular component", "typescript", f"app/components/{slug}/{slug}.component.ts",
         f"import {{ Component }} from '@angular/core';\n\n"
         f"@Component({{ selector: 'app-{slug}', standalone: true, template: '<h2>{sample}</h2>' }})\n"
         f"export class {sample}Component {{}}"),
    ]
    lines = ["Examples of the required format:"]
    for title, lang, path, body in examples:
        lines.append("")
        lines.append(f"{title}:")
        lines.append(f"{FENCE}{lang}")
        lines.append(f"// {path}")
        lines.append(body)
        lines.append(FENCE)
    return "\n".join(lines)


def render_layout() -> str:
    return """Output directory layout (the generator adds the tree roots itself):

backend/src/
  entities/      <name>.entity.ts
  dto/           create-<name>.dto.ts, update-<name>.dto.ts
  services/      <name>.service.ts
  controllers/   <name>.controller.ts
  modules/       <name>.module.ts
  app.module.ts
  main.ts
frontend/src/
  app/components/<name>/<name>.component.ts
  app/models/    <name>.model.ts"""


def render_format_rules() -> str:
    return """Formatting rules (mandatory):
1. Emit every file as its own fenced code block with a language tag.
2. The first line inside each block must be a single-line comment holding the file path, e.g. // services/user.service.ts
3. Paths are relative to the src/ directory of their tree: never start them with backend/, frontend/, src/ or a leading slash.
4. Do not put explanations inside code blocks and do not escape special characters.
5. Do not emit package.json or tsconfig.json; they are provided."""


def build_prompt(ctx: GenerationContext, project_name: str) -> str:
    """
    Render the single instructional prompt for a generation run.

    Args:
        ctx: Aggregated generation context
        project_name: Name given to the generated project

    Returns:
        The prompt text
    """
    sections = [
        render_role(project_name),
        render_artifacts(ctx),
        render_examples(ctx),
        render_layout(),
        render_format_rules(),
    ]
    return "\n\n".join(sections) + "\n"
