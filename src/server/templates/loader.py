"""
Page Template Loader

Template loading from multiple paths with fallback support.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, List

import jinja2
from jinja2 import ChoiceLoader, Environment, FileSystemLoader, TemplateNotFound

from common.exceptions import TemplateNotFoundError, TemplateRenderError

logger = logging.getLogger(__name__)


class TemplateLoader:
    """
    Loads HTML page templates from multiple locations.

    Search order:
    1. Additional paths passed in (e.g. the configured template_dir)
    2. User templates (~/.config/appcatalog/templates)
    3. Packaged templates (this directory)
    """

    TEMPLATE_PATHS = [
        Path.home() / ".config/appcatalog/templates",
        Path(__file__).parent,
    ]

    def __init__(self, additional_paths: Optional[List[Path]] = None):
        self._paths = [Path(p) for p in (additional_paths or [])]
        self._paths.extend(self.TEMPLATE_PATHS)

        self._env = self._create_environment()

    def _create_environment(self) -> Environment:
        """Create Jinja2 environment with all template paths."""
        loaders = []

        for path in self._paths:
            if path.exists() and path.is_dir():
                loaders.append(FileSystemLoader(str(path)))
                logger.debug(f"Added template path: {path}")

        return Environment(
            loader=ChoiceLoader(loaders),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, name: str, **variables: Any) -> str:
        """
        Render a template with variables.

        Args:
            name: Template filename (e.g., "app_list.html.j2")
            **variables: Template variables

        Returns:
            Rendered HTML

        Raises:
            TemplateNotFoundError: If no search path holds the template.
            TemplateRenderError: If rendering fails.
        """
        try:
            template = self._env.get_template(name)
            return template.render(**variables)
        except TemplateNotFound:
            raise TemplateNotFoundError(name)
        except jinja2.TemplateError as e:
            raise TemplateRenderError(name, str(e))

    def list_templates(self) -> List[str]:
        """List all available templates."""
        templates = []
        for path in self._paths:
            if path.exists():
                templates.extend(f.name for f in path.glob("*.html.j2"))
        return sorted(set(templates))
