"""Static manifests and docs for the generated trees (Jinja2-free)."""
import json
from typing import Any, Dict


def _to_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2) + "\n"


def render_backend_package_json() -> str:
    """Generate backend/package.json content."""
    return _to_json({
        "name": "nest-backend",
        "version": "1.0.0",
        "private": True,
        "scripts": {
            "build": "nest build",
            "format": "prettier --write \"src/**/*.ts\"",
            "start": "nest start",
            "start:dev": "nest start --watch",
            "start:debug": "nest start --debug --watch",
            "start:prod": "node dist/main",
            "test": "jest --passWithNoTests",
            "lint": "eslint \"{src,apps,libs,test}/**/*.ts\" --fix",
        },
        "jest": {
            "moduleFileExtensions": ["js", "json", "ts"],
            "rootDir": "src",
            "testRegex": ".*\\.spec\\.ts$",
            "transform": {"^.+\\.(t|j)s$": "ts-jest"},
            "testEnvironment": "node",
        },
        "dependencies": {
            "@nestjs/common": "^10.0.0",
            "@nestjs/core": "^10.0.0",
            "@nestjs/platform-express": "^10.0.0",
            "@nestjs/swagger": "^7.1.0",
            "@nestjs/typeorm": "^10.0.0",
            "class-transformer": "^0.5.1",
            "class-validator": "^0.14.0",
            "pg": "^8.11.0",
            "reflect-metadata": "^0.1.13",
            "rxjs": "^7.8.1",
            "typeorm": "^0.3.17",
        },
        "devDependencies": {
            "@nestjs/cli": "^10.0.0",
            "@types/express": "^4.17.17",
            "@types/node": "^20.3.1",
            "@types/jest": "^29.5.2",
            "@typescript-eslint/eslint-plugin": "^6.0.0",
            "@typescript-eslint/parser": "^6.0.0",
            "eslint": "^8.42.0",
            "jest": "^29.5.0",
            "prettier": "^3.0.0",
            "ts-jest": "^29.1.0",
            "typescript": "^5.1.3",
        },
    })


def render_backend_tsconfig() -> str:
    """Generate backend/tsconfig.json content."""
    return _to_json({
        "compilerOptions": {
            "module": "commonjs",
            "declaration": True,
            "removeComments": True,
            "emitDecoratorMetadata": True,
            "experimentalDecorators": True,
            "allowSyntheticDefaultImports": True,
            "target": "ES2021",
            "sourceMap": True,
            "outDir": "./dist",
            "baseUrl": "./",
            "incremental": True,
            "skipLibCheck": True,
            "strictNullChecks": False,
            "noImplicitAny": False,
            "strictBindCallApply": False,
            "forceConsistentCasingInFileNames": False,
            "noFallthroughCasesInSwitch": False,
        },
    })


def render_frontend_package_json() -> str:
    """Generate frontend/package.json content."""
    return _to_json({
        "name": "angular-frontend",
        "version": "1.0.0",
        "private": True,
        "scripts": {
            "ng": "ng",
            "start": "ng serve",
            "build": "ng build",
            "watch": "ng build --watch --configuration development",
            "test": "ng test",
        },
        "dependencies": {
            "@angular/animations": "^17.0.0",
            "@angular/common": "^17.0.0",
            "@angular/compiler": "^17.0.0",
            "@angular/core": "^17.0.0",
            "@angular/forms": "^17.0.0",
            "@angular/platform-browser": "^17.0.0",
            "@angular/platform-browser-dynamic": "^17.0.0",
            "@angular/router": "^17.0.0",
            "rxjs": "~7.8.0",
            "tslib": "^2.3.0",
            "zone.js": "~0.14.2",
        },
        "devDependencies": {
            "@angular-devkit/build-angular": "^17.0.0",
            "@angular/cli": "^17.0.0",
            "@angular/compiler-cli": "^17.0.0",
            "@types/jasmine": "~5.1.0",
            "jasmine-core": "~5.1.0",
            "karma": "~6.4.0",
            "karma-chrome-launcher": "~3.2.0",
            "karma-coverage": "~2.2.0",
            "karma-jasmine": "~5.1.0",
            "karma-jasmine-html-reporter": "~2.1.0",
            "typescript": "~5.2.2",
        },
    })


def render_frontend_tsconfig() -> str:
    """Generate frontend/tsconfig.json content."""
    return _to_json({
        "compileOnSave": False,
        "compilerOptions": {
            "baseUrl": "./",
            "outDir": "./dist/out-tsc",
            "forceConsistentCasingInFileNames": True,
            "strict": True,
            "noImplicitOverride": True,
            "noPropertyAccessFromIndexSignature": True,
            "noImplicitReturns": True,
            "noFallthroughCasesInSwitch": True,
            "sourceMap": True,
            "declaration": False,
            "downlevelIteration": True,
            "experimentalDecorators": True,
            "moduleResolution": "node",
            "importHelpers": True,
            "target": "ES2022",
            "module": "ES2022",
            "useDefineForClassFields": False,
            "lib": ["ES2022", "dom"],
        },
        "angularCompilerOptions": {
            "enableI18nLegacyMessageIdFormat": False,
            "strictInjectionParameters": True,
            "strictInputAccessModifiers": True,
            "strictTemplates": True,
        },
    })


def render_frontend_main_ts() -> str:
    """Generate frontend/src/main.ts: standalone bootstrap with a root shell component."""
    return """import { Component } from '@angular/core';
import { bootstrapApplication } from '@angular/platform-browser';

@Component({
  selector: 'app-root',
  standalone: true,
  template: '<h1>Generated Project</h1>',
})
class AppComponent {}

bootstrapApplication(AppComponent).catch((err) => console.error(err));
"""


def render_frontend_index_html() -> str:
    """Generate frontend/src/index.html."""
    return """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Generated Project</title>
  <base href="/">
  <meta name="viewport" content="width=device-width, initial-scale=1">
</head>
<body>
  <app-root></app-root>
</body>
</html>
"""


def render_root_package_json() -> str:
    """Generate the workspace package.json placed at the archive root."""
    return _to_json({
        "name": "generated-project",
        "version": "1.0.0",
        "private": True,
        "scripts": {
            "install:all": "cd backend && npm install && cd ../frontend && npm install",
            "start:backend": "cd backend && npm run start",
            "start:frontend": "cd frontend && npm run start",
            "build:all": "cd backend && npm run build && cd ../frontend && npm run build",
            "test:all": "cd backend && npm run test && cd ../frontend && npm run test",
        },
    })


def render_readme() -> str:
    """Generate README.md placed at the archive root."""
    return """# Generated Project

This project contains a NestJS backend and an Angular frontend generated from UML diagrams.

## Structure
- /backend - NestJS backend code
  - /src
    - /entities - TypeORM entities
    - /dto - Data transfer objects
    - /services - Business logic
    - /controllers - REST API controllers
    - /modules - NestJS modules
    - app.module.ts, main.ts - Application bootstrap
- /frontend - Angular frontend code
  - /src
    - /app/components - Angular components
    - /app/services - Angular services
    - /app/models - TypeScript interfaces
    - main.ts, index.html - Application bootstrap

## Getting Started

1. Install all dependencies:
   ```bash
   npm run install:all
   ```

2. Start the servers:
   - Backend: `npm run start:backend` (http://localhost:3000)
   - Frontend: `npm run start:frontend` (http://localhost:4200)

## Development

- Build both projects: `npm run build:all`
- Run tests: `npm run test:all`

Generated code is not compiled or verified; review it before use.
"""
