from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from netvlyx.domain.exceptions import TemplateLoadError, TemplateValidationError
from netvlyx.domain.templates import TemplateDefinition
from netvlyx.infrastructure.templates.adapters import to_domain_template_definition
from netvlyx.infrastructure.templates.validation_schema import (
    TemplateDefinitionPydantic,
)

log = structlog.get_logger(__name__)


def load_yaml_template(path: Path) -> TemplateDefinition:
    """Load and validate a YAML template, returning the domain model."""
    try:
        raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw)
        if data is None:
            raise TemplateValidationError("YAML file is empty")
        if not isinstance(data, dict):
            raise TemplateValidationError("YAML root must be a mapping/object")

        pydantic_model = TemplateDefinitionPydantic.model_validate(data)
        return to_domain_template_definition(pydantic_model)
    except (OSError, UnicodeDecodeError) as e:
        log.error(
            "template_load_failed",
            template_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise TemplateLoadError(str(e)) from e
    except ValidationError as e:
        log.error(
            "template_validation_failed",
            template_file=str(path),
            error_type="ValidationError",
            error_details=e.errors(),
        )
        raise TemplateValidationError(str(e)) from e
    except yaml.YAMLError as e:
        log.error(
            "template_validation_failed",
            template_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise TemplateValidationError(str(e)) from e
