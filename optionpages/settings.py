"""Settings screens in the admin dashboard.

``Settings`` walks a configuration tree and turns it into host registration
calls: menu and submenu pages, option groups, sections and fields. Each
registration carries a zero-argument render callback that the host invokes
later; views and dependencies are only resolved at that point.
"""

from __future__ import annotations

import logging
import os
from functools import partial
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Union

from .config_loader import load_config
from .exceptions import InvalidRegistrationError, ViewNotFoundError
from .host import AdminHost, DependencyManager
from .registry import PAGE_HOOK_REGISTRY, PageHookRegistry
from .types import (
    ConfigTree,
    FieldRenderRequest,
    FieldSpec,
    MenuFunction,
    PageRenderRequest,
    PageSpec,
    RenderResult,
    SectionContext,
    SectionRenderRequest,
    SectionSpec,
    SettingSpec,
)
from .views import ViewRenderer

logger = logging.getLogger(__name__)
logger.setLevel(os.environ.get("OPTIONPAGES_LOG_LEVEL", "INFO").upper())

ADMIN_MENU_ACTION = "admin_menu"
ADMIN_INIT_ACTION = "admin_init"


class Settings:
    """Registers settings pages, option groups, sections and fields with a host."""

    def __init__(
        self,
        config: Union[ConfigTree, Mapping[str, Any], str, Path],
        host: AdminHost,
        dependency_manager: Optional[DependencyManager] = None,
        page_registry: Optional[PageHookRegistry] = None,
        renderer: Optional[ViewRenderer] = None,
    ):
        """Initialize the settings registrar.

        Args:
            config: Configuration tree, raw mapping or path to a JSON/TOML file
            host: Admin runtime receiving the registration calls
            dependency_manager: Optional asset manager used to enqueue page
                dependencies; without one, enqueue requests are dropped
            page_registry: Registry of already registered page slugs, shared
                with every other registrar on the same host
            renderer: View renderer used by render callbacks
        """
        self.config = load_config(config)
        self.host = host
        self.dependency_manager = dependency_manager
        self.page_registry = page_registry if page_registry is not None else PAGE_HOOK_REGISTRY
        self.renderer = renderer if renderer is not None else ViewRenderer()
        self.page_hooks: List[Any] = []

    def register_hooks(self) -> None:
        """Attach page and settings registration to the host lifecycle."""
        self.host.add_action(ADMIN_MENU_ACTION, self.add_pages)
        self.host.add_action(ADMIN_INIT_ACTION, self.init_settings)

    # Pages

    def add_pages(self) -> None:
        """Register the configured menu pages, then the submenu pages."""
        for key in ("menu_pages", "submenu_pages"):
            if not self.config.has_key(key):
                continue
            for page in self.config.get_key(key):
                self.add_page(page)

    def add_page(self, page: PageSpec) -> Optional[Any]:
        """Register a single page unless its slug is already known.

        Skipping known slugs lets several configuration sources share one
        page. The first registration wins, later declarations are ignored.

        Raises:
            InvalidRegistrationError: If the page cannot be handed to the host
        """
        if self.page_registry.is_registered(page.menu_slug) or self.host.is_page_slug_registered(page.menu_slug):
            logger.debug(f"Page '{page.menu_slug}' already registered, skipping")
            return None

        register = self._page_registration(page)
        callback = partial(self._invoke, self.render_page, PageRenderRequest(page=page))
        try:
            page_hook = register(callback)
        except (TypeError, ValueError) as exc:
            raise InvalidRegistrationError(
                f"Unable to register page '{page.menu_slug}': {exc}",
                details={"menu_slug": page.menu_slug, "menu_function": str(page.menu_function)},
                cause=exc,
            ) from exc

        self.page_hooks.append(page_hook)
        self.page_registry.record(page.menu_slug, page_hook)
        logger.debug(f"Registered page '{page.menu_slug}' with hook {page_hook!r}")
        return page_hook

    def _page_registration(self, page: PageSpec) -> Callable[[Callable[[], str]], Any]:
        """Pick the host primitive for ``page`` before any callback exists."""
        if page.menu_function == MenuFunction.ADD_MENU_PAGE:
            return lambda callback: self.host.register_menu_page(
                page.title,
                page.display_menu_title,
                page.capability,
                page.menu_slug,
                callback,
                page.icon_url,
                page.position,
            )
        elif page.menu_function == MenuFunction.ADD_SUBMENU_PAGE:
            if not page.parent_slug:
                raise InvalidRegistrationError(
                    f"Submenu page '{page.menu_slug}' has no parent_slug",
                    details={"menu_slug": page.menu_slug},
                )
            return lambda callback: self.host.register_submenu_page(
                page.parent_slug,
                page.title,
                page.display_menu_title,
                page.capability,
                page.menu_slug,
                callback,
            )
        raise InvalidRegistrationError(
            f"Unknown menu function '{page.menu_function}' for page '{page.menu_slug}'",
            details={"menu_slug": page.menu_slug, "menu_function": str(page.menu_function)},
        )

    # Settings

    def init_settings(self) -> None:
        """Register every configured option group with its sections and fields."""
        if not self.config.has_key("settings"):
            return
        for setting_name, setting in self.config.get_key("settings").items():
            self.add_setting(setting, setting_name)

    def add_setting(self, setting: SettingSpec, setting_name: str) -> None:
        self.host.register_option_group(setting_name, setting_name, setting.sanitize_callback)
        logger.debug(f"Registered option group '{setting_name}' with {len(setting.sections)} section(s)")

        context = SectionContext(setting_name=setting_name, page=setting_name)
        for section_name, section in setting.sections.items():
            self.add_section(section, section_name, context)

    def add_section(self, section: SectionSpec, section_name: str, context: SectionContext) -> None:
        request = SectionRenderRequest(section_name=section_name, section=section, page=context.page)
        self.host.register_section(
            section_name,
            section.title,
            partial(self._invoke, self.render_section, request),
            context.page,
        )

        field_context = context.with_section(section_name)
        for field_name, field in section.fields.items():
            self.add_field(field, field_name, field_context)

    def add_field(self, field: FieldSpec, field_name: str, context: SectionContext) -> None:
        request = FieldRenderRequest(
            field_name=field_name,
            field=field,
            setting_name=context.setting_name,
            page=context.page,
            section=context.section,
        )
        self.host.register_field(
            field_name,
            field.title,
            partial(self._invoke, self.render_field, request),
            context.page,
            context.section,
        )

    # Rendering

    @staticmethod
    def _invoke(render: Callable[[Any], RenderResult], request: Any) -> str:
        # Host-facing callback: errors raise at the host call site.
        return render(request).unwrap()

    def render_page(self, request: PageRenderRequest) -> RenderResult:
        """Render a page view and enqueue its dependencies."""
        page = request.page
        output = ""
        if page.view is not None:
            try:
                output = self.renderer.render(page.view, {"page": page}, kind="page")
            except ViewNotFoundError as exc:
                return RenderResult(error=exc)
        for handle in page.dependencies:
            self.enqueue_dependency(handle)
        return RenderResult(output=output)

    def render_section(self, request: SectionRenderRequest) -> RenderResult:
        section = request.section
        if section.view is None:
            return RenderResult()
        try:
            output = self.renderer.render(
                section.view,
                {"section": section, "section_name": request.section_name, "page": request.page},
                kind="section",
            )
        except ViewNotFoundError as exc:
            return RenderResult(error=exc)
        return RenderResult(output=output)

    def render_field(self, request: FieldRenderRequest) -> RenderResult:
        """Render a field view with the current stored options.

        A missing view is reported before options are fetched. Without a view
        the options are still fetched and nothing is rendered.
        """
        field = request.field
        if field.view is not None:
            try:
                self.renderer.resolve(field.view, kind="field")
            except ViewNotFoundError as exc:
                return RenderResult(error=exc)

        options = self.host.get_stored_options(request.setting_name)
        if field.view is None:
            return RenderResult()

        context = {
            "options": options,
            "field": field,
            "field_name": request.field_name,
            "setting_name": request.setting_name,
            "section_name": request.section,
            "page": request.page,
        }
        try:
            output = self.renderer.render(field.view, context, kind="field")
        except ViewNotFoundError as exc:
            return RenderResult(error=exc)
        return RenderResult(output=output)

    # Dependencies

    def enqueue_dependency(self, handle: str) -> None:
        """Enqueue a page dependency; failures are logged and swallowed."""
        if self.dependency_manager is None:
            return
        try:
            self.dependency_manager.enqueue_handle(handle)
        except Exception:
            logger.warning(f"Failed to enqueue dependency '{handle}'", exc_info=True)
