"""Load and validate settings configuration trees.

A tree can come from a JSON or TOML file, or from an in-memory mapping::

    {
        "menu_pages": [{"menu_slug": "...", "title": "...", "capability": "..."}],
        "submenu_pages": [{"parent_slug": "...", "menu_slug": "...", ...}],
        "settings": {
            "<option group>": {
                "sanitize_callback": "package.module:function",
                "sections": {"<section>": {"title": "...", "view": "...", "fields": {...}}},
            }
        },
    }

Key order is preserved at every level and drives registration order.
"""

from __future__ import annotations

import importlib
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import toml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError
from .types import ConfigTree, FieldSpec, MenuFunction, PageSpec, SectionSpec, SettingSpec

logger = logging.getLogger(__name__)
logger.setLevel(os.environ.get("OPTIONPAGES_LOG_LEVEL", "INFO").upper())

CONFIG_PATH_ENV = "OPTIONPAGES_CONFIG"


class FieldModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = ""
    view: Optional[str] = None


class SectionModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = ""
    view: Optional[str] = None
    fields: Dict[str, FieldModel] = Field(default_factory=dict)


class SettingModel(BaseModel):
    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    sanitize_callback: Optional[Union[str, Callable[..., Any]]] = None
    sections: Dict[str, SectionModel] = Field(default_factory=dict)


class PageModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    menu_slug: str = Field(min_length=1)
    title: str = Field(alias="page_title", default="")
    capability: str = "manage_options"
    menu_title: Optional[str] = None
    menu_function: Optional[str] = None
    icon_url: Optional[str] = None
    position: Optional[int] = None
    parent_slug: Optional[str] = None
    view: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)


class TreeModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    menu_pages: List[PageModel] = Field(default_factory=list)
    submenu_pages: List[PageModel] = Field(default_factory=list)
    settings: Dict[str, SettingModel] = Field(default_factory=dict)


def resolve_callable(reference: Union[str, Callable[..., Any], None]) -> Optional[Callable[..., Any]]:
    """Resolve a ``"module:attribute"`` (or dotted) reference to a callable."""
    if reference is None or callable(reference):
        return reference
    module_name, sep, attribute = reference.partition(":")
    if not sep:
        module_name, _, attribute = reference.rpartition(".")
    if not module_name or not attribute:
        raise ConfigurationError(f"Invalid callable reference: {reference}")
    try:
        target = importlib.import_module(module_name)
        for part in attribute.split("."):
            target = getattr(target, part)
    except (ImportError, AttributeError) as exc:
        raise ConfigurationError(f"Unable to resolve callable '{reference}': {exc}", cause=exc) from exc
    if not callable(target):
        raise ConfigurationError(f"Reference '{reference}' does not point to a callable")
    return target


def _menu_function(raw: Optional[str], default: MenuFunction) -> Union[MenuFunction, str]:
    if raw is None:
        return default
    try:
        return MenuFunction(raw)
    except ValueError:
        # Unknown variants are kept so registration can reject them.
        logger.debug(f"Unknown menu function '{raw}' kept for registration-time rejection")
        return raw


def _build_page(model: PageModel, default_function: MenuFunction) -> PageSpec:
    return PageSpec(
        menu_slug=model.menu_slug,
        title=model.title,
        capability=model.capability,
        menu_function=_menu_function(model.menu_function, default_function),
        menu_title=model.menu_title,
        icon_url=model.icon_url,
        position=model.position,
        parent_slug=model.parent_slug,
        view=model.view,
        dependencies=tuple(model.dependencies),
    )


def _build_setting(name: str, model: SettingModel) -> SettingSpec:
    sections = {
        section_name: SectionSpec(
            title=section.title,
            view=section.view,
            fields={
                field_name: FieldSpec(title=field_model.title, view=field_model.view)
                for field_name, field_model in section.fields.items()
            },
        )
        for section_name, section in model.sections.items()
    }
    return SettingSpec(
        option_group_name=name,
        sanitize_callback=resolve_callable(model.sanitize_callback),
        sections=sections,
    )


def build_config_tree(data: Mapping[str, Any]) -> ConfigTree:
    """Validate ``data`` and convert it to a ``ConfigTree``."""
    try:
        tree = TreeModel.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid settings configuration: {exc.error_count()} error(s)",
            details={"errors": exc.errors(include_url=False, include_input=False)},
            cause=exc,
        ) from exc

    return ConfigTree(
        menu_pages=[_build_page(page, MenuFunction.ADD_MENU_PAGE) for page in tree.menu_pages],
        submenu_pages=[_build_page(page, MenuFunction.ADD_SUBMENU_PAGE) for page in tree.submenu_pages],
        settings={name: _build_setting(name, setting) for name, setting in tree.settings.items()},
    )


def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a JSON or TOML file into a plain mapping."""
    config_path = Path(path).expanduser()
    if not config_path.is_file():
        raise ConfigurationError(f"Can not find config file: {config_path}")

    with open(config_path, "r", encoding="utf-8") as file:
        try:
            if config_path.suffix.lower() == ".toml":
                data = toml.load(file)
            else:
                data = json.load(file)
        except (toml.TomlDecodeError, json.JSONDecodeError) as exc:
            logger.error(f"Failed to parse config file {config_path}: {exc}")
            raise ConfigurationError(f"Failed to parse config file {config_path}: {exc}", cause=exc) from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping at the top level")
    logger.info(f"Loaded settings configuration from {config_path}")
    return data


def load_config(source: Union[ConfigTree, Mapping[str, Any], str, Path, None] = None) -> ConfigTree:
    """Return a validated ``ConfigTree`` from a tree, mapping or file path.

    With no source, the path in ``OPTIONPAGES_CONFIG`` is used.
    """
    if isinstance(source, ConfigTree):
        return source
    if source is None:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if not env_path:
            raise ConfigurationError(f"No configuration supplied and {CONFIG_PATH_ENV} is not set")
        source = env_path
    if isinstance(source, (str, Path)):
        source = read_config_file(source)
    return build_config_tree(source)
