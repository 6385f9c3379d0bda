"""Host-side interfaces consumed by ``Settings``, plus an in-memory host.

The real admin runtime is external. ``InMemoryHost`` records every
registration in order and can drive render callbacks, which makes it useful
for tests, previews and scripted checks of a configuration tree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, runtime_checkable

from .registry import PAGE_HOOK_REGISTRY, PageHookRegistry

logger = logging.getLogger(__name__)

RenderCallback = Callable[[], Any]


@runtime_checkable
class AdminHost(Protocol):
    """Registration primitives exposed by the admin runtime."""

    def register_menu_page(
        self,
        page_title: str,
        menu_title: str,
        capability: str,
        menu_slug: str,
        callback: RenderCallback,
        icon_url: Optional[str] = None,
        position: Optional[int] = None,
    ) -> Any: ...

    def register_submenu_page(
        self,
        parent_slug: str,
        page_title: str,
        menu_title: str,
        capability: str,
        menu_slug: str,
        callback: RenderCallback,
    ) -> Any: ...

    def register_option_group(
        self, option_group: str, option_name: str, sanitize_callback: Optional[Callable] = None
    ) -> None: ...

    def register_section(self, section_id: str, title: str, callback: RenderCallback, page: str) -> None: ...

    def register_field(
        self, field_id: str, title: str, callback: RenderCallback, page: str, section: str
    ) -> None: ...

    def is_page_slug_registered(self, menu_slug: str) -> bool: ...

    def get_stored_options(self, option_name: str) -> Mapping[str, Any]: ...

    def add_action(self, hook_name: str, callback: Callable[[], Any]) -> None: ...


@runtime_checkable
class DependencyManager(Protocol):
    """Asset manager able to enqueue a registered dependency by handle."""

    def enqueue_handle(self, handle: str) -> Any: ...


@dataclass
class RegisteredPage:
    menu_slug: str
    page_title: str
    menu_title: str
    capability: str
    callback: RenderCallback
    hook: str
    parent_slug: Optional[str] = None
    icon_url: Optional[str] = None
    position: Optional[int] = None


@dataclass
class RegisteredSection:
    section_id: str
    title: str
    callback: RenderCallback
    page: str
    fields: Dict[str, "RegisteredField"] = field(default_factory=dict)


@dataclass
class RegisteredField:
    field_id: str
    title: str
    callback: RenderCallback
    page: str
    section: str


class InMemoryHost:
    """Recording host implementing ``AdminHost``.

    Page registrations are mirrored into ``page_registry`` the way an admin
    runtime tracks its page hooks, so other registrars see them.
    """

    def __init__(
        self,
        page_registry: Optional[PageHookRegistry] = None,
        options: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self.page_registry = page_registry if page_registry is not None else PAGE_HOOK_REGISTRY
        self.pages: Dict[str, RegisteredPage] = {}
        self.option_groups: Dict[str, Dict[str, Optional[Callable]]] = {}
        self.sections: Dict[str, Dict[str, RegisteredSection]] = {}
        self.options: Dict[str, Dict[str, Any]] = dict(options or {})
        self.actions: Dict[str, List[Callable[[], Any]]] = {}

    @staticmethod
    def _hook_name(menu_slug: str, parent_slug: Optional[str] = None) -> str:
        prefix = "toplevel_page" if parent_slug is None else f"{parent_slug}_page"
        return f"{prefix}_{menu_slug}"

    def is_page_slug_registered(self, menu_slug: str) -> bool:
        return self.page_registry.is_registered(menu_slug)

    def register_menu_page(self, page_title, menu_title, capability, menu_slug, callback, icon_url=None, position=None):
        hook = self._hook_name(menu_slug)
        self.pages[menu_slug] = RegisteredPage(
            menu_slug=menu_slug,
            page_title=page_title,
            menu_title=menu_title,
            capability=capability,
            callback=callback,
            hook=hook,
            icon_url=icon_url,
            position=position,
        )
        self.page_registry.record(menu_slug, hook)
        logger.debug(f"Registered menu page '{menu_slug}' as {hook}")
        return hook

    def register_submenu_page(self, parent_slug, page_title, menu_title, capability, menu_slug, callback):
        hook = self._hook_name(menu_slug, parent_slug)
        self.pages[menu_slug] = RegisteredPage(
            menu_slug=menu_slug,
            page_title=page_title,
            menu_title=menu_title,
            capability=capability,
            callback=callback,
            hook=hook,
            parent_slug=parent_slug,
        )
        self.page_registry.record(menu_slug, hook)
        logger.debug(f"Registered submenu page '{menu_slug}' under '{parent_slug}' as {hook}")
        return hook

    def register_option_group(self, option_group, option_name, sanitize_callback=None):
        self.option_groups.setdefault(option_group, {})[option_name] = sanitize_callback

    def register_section(self, section_id, title, callback, page):
        self.sections.setdefault(page, {})[section_id] = RegisteredSection(
            section_id=section_id, title=title, callback=callback, page=page
        )

    def register_field(self, field_id, title, callback, page, section):
        page_sections = self.sections.setdefault(page, {})
        if section not in page_sections:
            # Fields may target sections registered by another component.
            page_sections[section] = RegisteredSection(section_id=section, title="", callback=lambda: "", page=page)
        page_sections[section].fields[field_id] = RegisteredField(
            field_id=field_id, title=title, callback=callback, page=page, section=section
        )

    def get_stored_options(self, option_name):
        return dict(self.options.get(option_name) or {})

    def update_option(self, option_name: str, value: Dict[str, Any]) -> Dict[str, Any]:
        """Store ``value`` for ``option_name``, passing it through sanitize callbacks."""
        for callbacks in self.option_groups.values():
            sanitize = callbacks.get(option_name)
            if sanitize is not None:
                value = sanitize(value)
        if not isinstance(value, Mapping):
            raise TypeError(f"Sanitized value for option '{option_name}' must be a mapping, got {type(value).__name__}")
        self.options[option_name] = value
        return value

    def add_action(self, hook_name, callback):
        self.actions.setdefault(hook_name, []).append(callback)

    def do_action(self, hook_name: str) -> None:
        """Run every callback attached to ``hook_name`` in attachment order."""
        for callback in self.actions.get(hook_name, []):
            callback()

    def render_page(self, menu_slug: str) -> str:
        """Render a registered page: its own view first, then sections and fields.

        Sections are looked up under the page slug, matching how option
        groups name the page their sections belong to.
        """
        page = self.pages.get(menu_slug)
        chunks: List[str] = []
        if page is not None:
            chunks.append(page.callback() or "")
        for section in self.sections.get(menu_slug, {}).values():
            chunks.append(section.callback() or "")
            for registered_field in section.fields.values():
                chunks.append(registered_field.callback() or "")
        return "".join(chunks)
