from __future__ import annotations

from dataclasses import dataclass
import importlib
from typing import Any, Iterable, Mapping

import pydantic
from pydantic import BaseModel, TypeAdapter

from layered_dotenv.config import ConfigError


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str


def format_issues(issues: Iterable[ValidationIssue]) -> str:
    lines = [f"{issue.path}: {issue.message}" for issue in issues]
    return "Validation error:\n" + "\n".join(lines)


class ValidationError(RuntimeError):
    def __init__(
        self,
        issues: list[ValidationIssue],
        *,
        cause: BaseException | None = None,
    ):
        super().__init__(format_issues(issues))
        self.issues = issues
        self.cause = cause


def issues_from_pydantic(exc: pydantic.ValidationError) -> list[ValidationIssue]:
    """Flatten a pydantic error into one issue per failing location."""
    issues: list[ValidationIssue] = []
    for err in exc.errors():
        path = ".".join(str(part) for part in err.get("loc", ())) or "root"
        issues.append(ValidationIssue(path=path, message=err.get("msg", "invalid")))
    return issues


def validate(schema: Any, data: Mapping[str, Any]) -> Any:
    """Validate a key/value mapping against a schema.

    schema is a pydantic model class, or any type pydantic.TypeAdapter
    accepts (a TypedDict, dict[str, int], ...). Returns the validated value.
    """
    payload = dict(data)
    try:
        if isinstance(schema, type) and issubclass(schema, BaseModel):
            return schema.model_validate(payload)
        return TypeAdapter(schema).validate_python(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(issues_from_pydantic(exc), cause=exc) from exc


def import_schema(target: str) -> Any:
    """Resolve a "package.module:Name" import path to a schema object."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"Schema must be given as module:Name (got {target!r})")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import schema module {module_name!r}: {exc}") from exc

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise ConfigError(f"Schema {attr!r} not found in {module_name!r}") from exc
    return obj
