"""Template registry with lazy loading and in-memory caching."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit

import structlog
import yaml

from netvlyx.domain.exceptions import DuplicateTemplateError, TemplateNotFoundError
from netvlyx.domain.templates import TemplateDefinition

from .loader import load_yaml_template

log = structlog.get_logger(__name__)

BUNDLED_TEMPLATE_DIR = Path(__file__).resolve().parents[2] / "templates"


class TemplateRegistry:
    """
    Lazy-loading template registry.

    discover():
      - indexes files only (no YAML parsing)

    get()/list_names()/for_url()/load_all():
      - may load/parse on demand and cache results
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        self._template_dir = template_dir or BUNDLED_TEMPLATE_DIR
        self._discovered: bool = False
        self._paths: list[Path] = []
        self._cache: dict[str, TemplateDefinition] = {}
        self._by_path: dict[Path, TemplateDefinition] = {}

    @property
    def template_dir(self) -> Path:
        return self._template_dir

    def discover(self) -> None:
        if self._discovered:
            return

        self._discovered = True
        self._paths = []

        if not self._template_dir.is_dir():
            log.warning("template_directory_not_found", directory=str(self._template_dir))
            return

        for path in sorted(self._template_dir.iterdir(), key=lambda p: p.name):
            if path.is_file() and path.suffix.lower() in {".yaml", ".yml"}:
                self._paths.append(path)

        log.info(
            "templates_discovered",
            count=len(self._paths),
            directory=str(self._template_dir),
        )
        if not self._paths:
            log.warning("no_templates_found", directory=str(self._template_dir))

    def list_names(self) -> list[str]:
        self.discover()

        names: set[str] = set()
        for path in self._paths:
            name = self._peek_name(path)
            if name is not None:
                names.add(name)
        return sorted(names)

    def get(self, name: str) -> TemplateDefinition:
        self.discover()

        if name in self._cache:
            return self._cache[name]

        for path in self._paths:
            if self._peek_name(path) != name:
                continue
            return self._load(path)

        raise TemplateNotFoundError(f"Template '{name}' not found")

    def load_all(self) -> list[TemplateDefinition]:
        """
        Force-load all discovered templates, sorted by name.

        Raises DuplicateTemplateError/validation/load errors.
        """
        self.discover()

        loaded: dict[str, TemplateDefinition] = {}
        for path in self._paths:
            template = self._load(path)
            if template.name in loaded:
                raise DuplicateTemplateError(
                    f"Template name '{template.name}' already exists"
                )
            loaded[template.name] = template
        return [loaded[name] for name in sorted(loaded)]

    def for_url(self, url: str) -> TemplateDefinition | None:
        """First template (by name) whose host patterns match *url*."""
        host = (urlsplit(url).hostname or "").lower()
        if not host:
            return None
        for template in self.load_all():
            if template.matches_host(host):
                return template
        return None

    def _load(self, path: Path) -> TemplateDefinition:
        if path in self._by_path:
            return self._by_path[path]
        template = load_yaml_template(path)
        self._by_path[path] = template
        self._cache.setdefault(template.name, template)
        log.info("template_loaded", template_name=template.name, family=template.family)
        return template

    def _peek_name(self, path: Path) -> str | None:
        """Read the top-level ``name`` without full validation."""
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError):
            return None
        if not isinstance(data, dict):
            return None
        name = data.get("name")
        return name.strip() if isinstance(name, str) and name.strip() else None
