"""URI-templated resources.

Templates are registered under their URI template string; the dispatcher
matches an incoming URI against them and passes the template variables as
arguments. JSON resources return plain dicts, text resources return strings.
"""
from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import Field

from .errors import NotFoundError
from .registry import CallKind, HandlerRegistry
from .schema import ArgumentSchema


class ExampleArgs(ArgumentSchema):
    id: str = Field(description="Resource ID")


def example(args: ExampleArgs) -> str:
    return f"This is an example resource with ID: {args.id}"


class ConfigArgs(ArgumentSchema):
    environment: str = Field(description="Environment name (dev, staging, prod)")
    service: str = Field(description="Service name")


def config(args: ConfigArgs) -> Dict[str, Any]:
    env, service = args.environment, args.service
    prod = env == "prod"
    return {
        "environment": env,
        "service": service,
        "settings": {
            "database": {
                "host": f"{service}-{env}.db.example.com",
                "port": 5432 if prod else 5433,
                "ssl": prod,
            },
            "cache": {
                "redis_url": f"redis://{service}-{env}.cache.example.com:6379",
                "ttl": 3600 if prod else 300,
            },
            "logging": {"level": "info" if prod else "debug", "format": "json"},
            "features": {"newFeatureEnabled": not prod, "analyticsEnabled": True},
        },
        "lastUpdated": datetime.now(timezone.utc).isoformat(),
    }


class ApiDocArgs(ArgumentSchema):
    version: str = Field(description="API version (v1, v2, etc.)")
    endpoint: str = Field(description="API endpoint name")


def api_documentation(args: ApiDocArgs) -> Dict[str, Any]:
    version, endpoint = args.version, args.endpoint
    return {
        "version": version,
        "endpoint": f"/{version}/{endpoint}",
        "methods": {
            "GET": {
                "description": f"Retrieve {endpoint} data",
                "parameters": [
                    {"name": "id", "type": "string", "required": True,
                     "description": f"Unique identifier for {endpoint}"},
                    {"name": "fields", "type": "string", "required": False,
                     "description": "Comma-separated list of fields to return"},
                ],
                "responses": {
                    "200": {
                        "description": "Success",
                        "schema": {
                            "type": "object",
                            "properties": {
                                "id": {"type": "string"},
                                "data": {"type": "object"},
                                "metadata": {"type": "object"},
                            },
                        },
                    },
                    "404": {"description": "Resource not found"},
                },
            },
            "POST": {
                "description": f"Create new {endpoint}",
                "requestBody": {
                    "required": True,
                    "schema": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string", "required": True},
                            "description": {"type": "string"},
                        },
                    },
                },
                "responses": {
                    "201": {"description": "Created successfully"},
                    "400": {"description": "Invalid request data"},
                },
            },
        },
        "examples": {
            "curl": f'curl -X GET "https://api.example.com/{version}/{endpoint}/123"',
            "python": (
                "import httpx\n"
                f'data = httpx.get("https://api.example.com/{version}/{endpoint}/123").json()'
            ),
        },
    }


class LogsArgs(ArgumentSchema):
    service: str = Field(description="Service name")
    date: str = Field(description="Date in YYYY-MM-DD format")
    level: str = Field(description="Log level (error, warn, info, debug)")


LOG_LINES = (
    ("09:15:32", "Service started successfully"),
    ("09:16:01", "Database connection established"),
    ("09:16:45", "Processing incoming request"),
    ("09:17:12", "Operation completed in 267ms"),
    ("09:18:33", "Cache updated with new data"),
)

ERROR_LINES = (
    ("09:19:44", "Connection timeout to external service"),
    ("09:20:15", "Retry attempt 1/3 failed"),
    ("09:20:45", "Critical error in payment processing module"),
)


def logs(args: LogsArgs) -> str:
    level = args.level.upper()
    lines = [f"{args.date} {at} [{level}] {args.service}: {text}" for at, text in LOG_LINES]
    if args.level == "error":
        lines.extend(f"{args.date} {at} [ERROR] {args.service}: {text}" for at, text in ERROR_LINES)
    return "\n".join(lines)


class SchemaArgs(ArgumentSchema):
    database: str = Field(description="Database name")
    table: str = Field(description="Table name")


def table_schema(args: SchemaArgs) -> Dict[str, Any]:
    table = args.table
    return {
        "database": args.database,
        "table": table,
        "columns": [
            {"name": "id", "type": "INTEGER", "primaryKey": True, "autoIncrement": True, "nullable": False},
            {"name": "name", "type": "VARCHAR(255)", "nullable": False, "index": True},
            {"name": "email", "type": "VARCHAR(255)", "nullable": False, "unique": True},
            {"name": "created_at", "type": "TIMESTAMP", "default": "CURRENT_TIMESTAMP", "nullable": False},
            {"name": "updated_at", "type": "TIMESTAMP",
             "default": "CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP", "nullable": False},
        ],
        "indexes": [
            {"name": f"idx_{table}_name", "columns": ["name"], "type": "BTREE"},
            {"name": f"idx_{table}_email", "columns": ["email"], "type": "HASH", "unique": True},
        ],
        "constraints": [
            {"name": f"pk_{table}_id", "type": "PRIMARY KEY", "columns": ["id"]},
            {"name": f"uk_{table}_email", "type": "UNIQUE", "columns": ["email"]},
        ],
    }


class MetricsArgs(ArgumentSchema):
    service: str = Field(description="Service name")
    timeframe: str = Field(description="Time period (1h, 24h, 7d, 30d)")


def metrics(args: MetricsArgs) -> Dict[str, Any]:
    uniform = random.uniform
    return {
        "service": args.service,
        "timeframe": args.timeframe,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "performance": {
            "averageResponseTime": uniform(50, 250),
            "requestsPerSecond": uniform(100, 1100),
            "errorRate": uniform(0, 0.05),
            "uptime": uniform(99.4, 99.9),
        },
        "resources": {
            "cpuUsage": uniform(10, 90),
            "memoryUsage": uniform(20, 90),
            "diskUsage": uniform(30, 90),
            "networkIn": uniform(100, 1100),
            "networkOut": uniform(50, 850),
        },
        "endpoints": [
            {
                "path": "/api/users",
                "requests": random.randint(1000, 10999),
                "averageTime": uniform(20, 120),
                "errors": random.randint(0, 49),
            },
            {
                "path": "/api/products",
                "requests": random.randint(500, 8499),
                "averageTime": uniform(30, 180),
                "errors": random.randint(0, 24),
            },
        ],
    }


DOC_TEMPLATES: Dict[str, Dict[str, str]] = {
    "readme": {
        "basic": """# Project Name

## Description
Brief description of what this project does and who it's for.

## Installation
```bash
pip install project-name
```

## Usage
```python
import project_name
# Example usage
```

## Contributing
Please read [CONTRIBUTING.md](CONTRIBUTING.md) for details on our code of conduct.

## License
This project is licensed under the MIT License - see the [LICENSE.md](LICENSE.md) file for details.""",
    },
    "api": {
        "endpoint": """## API Endpoint: {endpoint_name}

### Description
Brief description of what this endpoint does.

### HTTP Method
`{method}`

### URL
`{base_url}/{endpoint}`

### Parameters
| Name | Type | Required | Description |
|------|------|----------|-------------|
| param1 | string | Yes | Description of param1 |
| param2 | number | No | Description of param2 |

### Response
```json
{
  "status": "success",
  "data": {
    "example": "response"
  }
}
```

### Error Codes
- `400` - Bad Request
- `404` - Not Found
- `500` - Internal Server Error""",
    },
    "guide": {
        "tutorial": """# Tutorial: {tutorial_name}

## Prerequisites
- List any prerequisites
- Required software or knowledge

## Step 1: Setup
Detailed instructions for the first step.

## Step 2: Configuration
Instructions for configuration.

## Step 3: Implementation
Core implementation steps.

## Troubleshooting
Common issues and solutions.

## Next Steps
What to do after completing this tutorial.""",
    },
    "changelog": {
        "release": """# Changelog

## [Unreleased]
### Added
- New features

### Changed
- Changes in existing functionality

### Deprecated
- Soon-to-be removed features

### Removed
- Now removed features

### Fixed
- Bug fixes

### Security
- Security improvements

## [1.0.0] - 2024-01-01
### Added
- Initial release""",
    },
}


class DocsArgs(ArgumentSchema):
    type: str = Field(description="Documentation type (readme, api, guide, changelog)")
    template: str = Field(description="Template name")


def docs(args: DocsArgs) -> str:
    content = DOC_TEMPLATES.get(args.type, {}).get(args.template)
    if content is None:
        raise NotFoundError(f"Template not found: {args.type}/{args.template}")
    return content


SNIPPETS: Dict[str, Dict[str, str]] = {
    "javascript": {
        "utils": """// Utility functions
const debounce = (func, wait) => {
  let timeout;
  return function executedFunction(...args) {
    const later = () => {
      clearTimeout(timeout);
      func(...args);
    };
    clearTimeout(timeout);
    timeout = setTimeout(later, wait);
  };
};

const formatDate = (date) => {
  return new Intl.DateTimeFormat('en-US', {
    year: 'numeric',
    month: 'long',
    day: 'numeric'
  }).format(new Date(date));
};""",
        "examples": """// API request example
const fetchData = async (url) => {
  try {
    const response = await fetch(url);
    if (!response.ok) {
      throw new Error(`HTTP error! status: ${response.status}`);
    }
    return await response.json();
  } catch (error) {
    console.error('Fetch error:', error);
    throw error;
  }
};""",
    },
    "python": {
        "utils": """# Utility functions
import functools
import json
import time


def retry(max_attempts=3, delay=1):
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except Exception:
                    if attempt == max_attempts - 1:
                        raise
                    time.sleep(delay)
        return wrapper
    return decorator


def format_json(data, indent=2):
    return json.dumps(data, indent=indent, ensure_ascii=False)""",
    },
}


class SnippetArgs(ArgumentSchema):
    language: str = Field(description="Programming language (javascript, python, typescript, etc.)")
    category: str = Field(description="Snippet category (utils, examples, patterns)")


def snippets(args: SnippetArgs) -> str:
    snippet = SNIPPETS.get(args.language, {}).get(args.category)
    if snippet is None:
        raise NotFoundError(f"Snippet not found: {args.language}/{args.category}")
    return snippet


RESOURCES = (
    ("example://{id}", "Example Resource", ExampleArgs, example, "text/plain"),
    ("config://{environment}/{service}", "Configuration Settings", ConfigArgs, config, "application/json"),
    ("api://{version}/{endpoint}", "API Documentation", ApiDocArgs, api_documentation, "application/json"),
    ("logs://{service}/{date}/{level}", "Application Logs", LogsArgs, logs, "text/plain"),
    ("schema://{database}/{table}", "Database Schema", SchemaArgs, table_schema, "application/json"),
    ("metrics://{service}/{timeframe}", "Service Metrics", MetricsArgs, metrics, "application/json"),
    ("docs://{type}/{template}", "Documentation Templates", DocsArgs, docs, "text/markdown"),
    ("snippets://{language}/{category}", "Code Snippets", SnippetArgs, snippets, "text/plain"),
)


def register_resources(registry: HandlerRegistry) -> None:
    for uri_template, description, schema, handler, mime_type in RESOURCES:
        registry.register(CallKind.RESOURCE, uri_template, schema, handler, description, mime_type)
