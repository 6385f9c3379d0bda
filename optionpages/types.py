"""Shared dataclasses and enums for settings page registration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple


def _frozen_mapping(value: Optional[Mapping[str, Any]] = None) -> Mapping[str, Any]:
    return MappingProxyType(dict(value or {}))


class MenuFunction(str, Enum):
    """Host primitive used to register a page."""

    ADD_MENU_PAGE = "add_menu_page"
    ADD_SUBMENU_PAGE = "add_submenu_page"


@dataclass(frozen=True)
class PageSpec:
    """Menu or submenu page declaration."""

    menu_slug: str
    title: str
    capability: str
    menu_function: MenuFunction = MenuFunction.ADD_MENU_PAGE
    menu_title: Optional[str] = None
    icon_url: Optional[str] = None
    position: Optional[int] = None
    parent_slug: Optional[str] = None
    view: Optional[str] = None
    dependencies: Tuple[str, ...] = ()

    @property
    def display_menu_title(self) -> str:
        return self.menu_title if self.menu_title is not None else self.title


@dataclass(frozen=True)
class FieldSpec:
    """Single settings field."""

    title: str = ""
    view: Optional[str] = None


@dataclass(frozen=True)
class SectionSpec:
    """Settings section holding an ordered set of fields."""

    title: str = ""
    view: Optional[str] = None
    fields: Mapping[str, FieldSpec] = field(default_factory=_frozen_mapping)

    def __post_init__(self):
        object.__setattr__(self, "fields", _frozen_mapping(self.fields))


@dataclass(frozen=True)
class SettingSpec:
    """Option group; its name doubles as the option storage key."""

    option_group_name: str
    sanitize_callback: Optional[Callable[[Any], Any]] = None
    sections: Mapping[str, SectionSpec] = field(default_factory=_frozen_mapping)

    def __post_init__(self):
        object.__setattr__(self, "sections", _frozen_mapping(self.sections))


@dataclass(frozen=True)
class ConfigTree:
    """Validated configuration tree consumed by ``Settings``."""

    menu_pages: Tuple[PageSpec, ...] = ()
    submenu_pages: Tuple[PageSpec, ...] = ()
    settings: Mapping[str, SettingSpec] = field(default_factory=_frozen_mapping)

    def __post_init__(self):
        object.__setattr__(self, "menu_pages", tuple(self.menu_pages))
        object.__setattr__(self, "submenu_pages", tuple(self.submenu_pages))
        object.__setattr__(self, "settings", _frozen_mapping(self.settings))

    def has_key(self, key: str) -> bool:
        """Return True when the tree declares a non-empty entry for ``key``."""
        return bool(getattr(self, key, None))

    def get_key(self, key: str) -> Any:
        if key not in ("menu_pages", "submenu_pages", "settings"):
            raise KeyError(key)
        return getattr(self, key)


@dataclass(frozen=True)
class SectionContext:
    """Names threaded from an option group down to its sections and fields."""

    setting_name: str
    page: str
    section: Optional[str] = None

    def with_section(self, section: str) -> "SectionContext":
        return SectionContext(setting_name=self.setting_name, page=self.page, section=section)


@dataclass(frozen=True)
class PageRenderRequest:
    page: PageSpec


@dataclass(frozen=True)
class SectionRenderRequest:
    section_name: str
    section: SectionSpec
    page: str


@dataclass(frozen=True)
class FieldRenderRequest:
    field_name: str
    field: FieldSpec
    setting_name: str
    page: str
    section: str


@dataclass(frozen=True)
class RenderResult:
    """Outcome of a render call, handed back to the host callback site."""

    output: str = ""
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """Return the rendered output or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.output
