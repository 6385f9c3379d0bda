"""Resolution and rendering of page, section and field views.

Views are Jinja2 templates referenced by path. Relative paths are looked up
in the configured search paths first and then in the working directory.
Resolution happens when the host invokes a render callback, so views may
appear on disk after registration.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from jinja2 import Environment, FileSystemLoader, Template

from .exceptions import ViewNotFoundError

logger = logging.getLogger(__name__)
logger.setLevel(os.environ.get("OPTIONPAGES_LOG_LEVEL", "INFO").upper())

VIEW_PATH_ENV = "OPTIONPAGES_VIEW_PATH"


def view_paths_from_env() -> List[str]:
    """Return the view search paths declared in ``OPTIONPAGES_VIEW_PATH``."""
    raw = os.environ.get(VIEW_PATH_ENV, "")
    return [entry for entry in raw.split(os.pathsep) if entry.strip()]


class ViewRenderer:
    """Renders view templates for settings pages, sections and fields."""

    def __init__(self, search_paths: Optional[Iterable[str]] = None):
        """Initialize the renderer.

        Args:
            search_paths: Directories used to resolve relative view paths.
                Defaults to the directories listed in ``OPTIONPAGES_VIEW_PATH``.
        """
        if search_paths is None:
            search_paths = view_paths_from_env()
        self.search_paths = [Path(path).expanduser() for path in search_paths]
        self.env = Environment(
            loader=FileSystemLoader([str(path) for path in self.search_paths]),
            autoescape=True,
            keep_trailing_newline=True,
        )

    def _candidates(self, view: str) -> List[Path]:
        path = Path(view).expanduser()
        if path.is_absolute():
            return [path]
        candidates = [root / path for root in self.search_paths]
        candidates.append(Path.cwd() / path)
        return candidates

    def resolve(self, view: str, kind: str = "page") -> Path:
        """Resolve ``view`` to a readable file.

        Raises:
            ViewNotFoundError: If no candidate exists or is readable
        """
        for candidate in self._candidates(view):
            if candidate.is_file() and os.access(candidate, os.R_OK):
                return candidate.resolve()
        logger.debug(f"Unable to resolve {kind} view '{view}' in {[str(p) for p in self.search_paths]}")
        raise ViewNotFoundError(view, kind)

    def exists(self, view: str) -> bool:
        try:
            self.resolve(view)
        except ViewNotFoundError:
            return False
        return True

    def _load_template(self, path: Path) -> Template:
        # Templates under a search path go through the loader so includes and
        # inheritance work relative to that root.
        for root in self.search_paths:
            try:
                relative = path.relative_to(root.resolve())
            except ValueError:
                continue
            return self.env.get_template(relative.as_posix())
        return self.env.from_string(path.read_text(encoding="utf-8"))

    def render(self, view: str, context: Optional[Dict[str, Any]] = None, kind: str = "page") -> str:
        """Resolve and render ``view`` with ``context``."""
        path = self.resolve(view, kind)
        template = self._load_template(path)
        rendered = template.render(**(context or {}))
        logger.debug(f"Rendered {kind} view {path} ({len(rendered)} chars)")
        return rendered
