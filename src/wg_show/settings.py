# SPDX-FileCopyrightText: Copyright (C) 2026 The wg-show Authors
# SPDX-License-Identifier: AGPL-3.0-only

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import click
import tomli

from .render import ELLIPSIS, TableLayout

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = "/etc/wireguard"
DEFAULT_WG_COMMAND = "wg"

# Room for at least one character before the ellipsis.
MIN_COLUMN_WIDTH = len(ELLIPSIS) + 1


def get_settings_path(custom_path: str | None = None) -> Path:
    if custom_path:
        return Path(custom_path)
    return Path.home() / ".config" / "wg-show" / "config.toml"


@dataclass
class Settings:
    config_dir: str = DEFAULT_CONFIG_DIR
    wg_command: str = DEFAULT_WG_COMMAND
    color: bool = True
    layout: TableLayout = field(default_factory=TableLayout)


def parse_layout(columns: dict[str, Any]) -> TableLayout:
    widths: dict[str, int] = {}
    for item in fields(TableLayout):
        if item.name not in columns:
            continue
        width = columns[item.name]
        minimum = 1 if item.name == "rule" else MIN_COLUMN_WIDTH
        if not isinstance(width, int) or isinstance(width, bool) or width < minimum:
            raise click.ClickException(
                f"Column width '{item.name}' must be an integer of at least {minimum}, got {width!r}"
            )
        widths[item.name] = width
    return TableLayout(**widths)


def load_settings(settings_path: str | None = None) -> Settings:
    """Read the TOML settings file.

    A missing default file yields the built-in defaults; a missing file
    that was asked for explicitly is an error.
    """
    path = get_settings_path(settings_path)
    if not path.exists():
        if settings_path:
            raise click.ClickException(f"Settings file not found: {path}")
        return Settings()

    try:
        with open(path, "rb") as f:
            config = tomli.load(f)
    except tomli.TOMLDecodeError as e:
        raise click.ClickException(f"Invalid settings file {path}: {e}")

    logger.debug("loaded settings from %s", path)
    general = config.get("wg-show", {})
    color = general.get("color", True)
    if not isinstance(color, bool):
        raise click.ClickException(f"Setting 'color' must be true or false, got {color!r}")
    return Settings(
        config_dir=str(general.get("config_dir", DEFAULT_CONFIG_DIR)),
        wg_command=str(general.get("wg_command", DEFAULT_WG_COMMAND)),
        color=color,
        layout=parse_layout(config.get("columns", {})),
    )
