"""Process-wide registry of admin page slugs."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class PageHookRegistry:
    """Tracks which menu slugs have already been registered with the host.

    Every ``Settings`` instance sharing a host should share one registry so a
    page declared by several configuration sources is registered once.
    """

    def __init__(self) -> None:
        self._hooks: Dict[str, Any] = {}

    def is_registered(self, menu_slug: str) -> bool:
        return menu_slug in self._hooks

    def record(self, menu_slug: str, hook: Any = None) -> None:
        """Record a registered slug; the first recorded hook is kept."""
        if menu_slug in self._hooks:
            logger.debug(f"Page slug '{menu_slug}' already recorded, keeping original hook")
            return
        self._hooks[menu_slug] = hook
        logger.debug(f"Recorded page slug '{menu_slug}' -> {hook!r}")

    def get_hook(self, menu_slug: str) -> Optional[Any]:
        return self._hooks.get(menu_slug)

    def slugs(self) -> List[str]:
        return list(self._hooks)

    def clear(self) -> None:
        self._hooks.clear()

    def __contains__(self, menu_slug: object) -> bool:
        return menu_slug in self._hooks

    def __len__(self) -> int:
        return len(self._hooks)


# Singleton instance shared by every Settings object in the process
PAGE_HOOK_REGISTRY = PageHookRegistry()
