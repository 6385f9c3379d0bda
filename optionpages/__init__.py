"""optionpages - declarative settings pages for admin dashboards."""

from __future__ import annotations

__version__ = "0.1.3"

from .config_loader import build_config_tree, load_config
from .exceptions import ConfigurationError, InvalidRegistrationError, OptionPagesError, ViewNotFoundError
from .host import AdminHost, DependencyManager, InMemoryHost
from .log_format import configure_logging
from .registry import PAGE_HOOK_REGISTRY, PageHookRegistry
from .settings import Settings
from .types import ConfigTree, FieldSpec, MenuFunction, PageSpec, RenderResult, SectionSpec, SettingSpec
from .views import ViewRenderer

__all__ = [
    "AdminHost",
    "ConfigTree",
    "ConfigurationError",
    "DependencyManager",
    "FieldSpec",
    "InMemoryHost",
    "InvalidRegistrationError",
    "MenuFunction",
    "OptionPagesError",
    "PAGE_HOOK_REGISTRY",
    "PageHookRegistry",
    "PageSpec",
    "RenderResult",
    "SectionSpec",
    "SettingSpec",
    "Settings",
    "ViewNotFoundError",
    "ViewRenderer",
    "build_config_tree",
    "configure_logging",
    "load_config",
]
