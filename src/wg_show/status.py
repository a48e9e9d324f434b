# SPDX-FileCopyrightText: Copyright (C) 2026 The wg-show Authors
# SPDX-License-Identifier: AGPL-3.0-only

import logging
import subprocess
from typing import Mapping

import click
from rich.console import Console

from . import __version__
from .config import PeerAnnotation, config_path_for, load_annotations
from .render import DEFAULT_STYLES, PLAIN_STYLES, render_annotated, render_table
from .settings import Settings, load_settings
from .snapshot import (
    SORT_ASC,
    SORT_DESC,
    extract_interface_name,
    parse_status,
    select_peers,
)

logger = logging.getLogger(__name__)


def run_wg_show(wg_command: str, wg_args: tuple[str, ...]) -> subprocess.CompletedProcess:
    cmd = [wg_command, "show", *wg_args]
    logger.debug("running %s", cmd)
    try:
        return subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except FileNotFoundError:
        raise click.ClickException(f"{wg_command} not found")


def find_annotations(
    settings: Settings,
    output: str,
    wg_args: tuple[str, ...],
) -> Mapping[str, PeerAnnotation]:
    interface = extract_interface_name(output, wg_args)
    if not interface:
        logger.debug("no interface name in status output")
        return {}
    config_path = config_path_for(settings.config_dir, interface)
    try:
        return load_annotations(config_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("cannot read %s, showing plain status: %s", config_path, e)
        return {}


@click.command(context_settings={"ignore_unknown_options": True})
@click.option(
    "--show-table",
    is_flag=True,
    help="Show peers as a table instead of annotated wg output.",
)
@click.option(
    "--filter-maintainer",
    "filter_maintainer",
    default=None,
    help="Only show peers with exactly this maintainer.",
)
@click.option(
    "--filter-group",
    "filter_group",
    default=None,
    help="Only show peers with exactly this group.",
)
@click.option(
    "--sort-handshake",
    "sort_handshake",
    type=click.Choice([SORT_ASC, SORT_DESC]),
    default=None,
    help="Sort peers by latest handshake (asc: most recent first).",
)
@click.option(
    "--config-dir",
    "config_dir",
    default=None,
    help="Directory holding <interface>.conf (default: /etc/wireguard).",
)
@click.option(
    "--settings",
    "settings_file",
    default=None,
    help="Path to settings file (default: ~/.config/wg-show/config.toml).",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output.",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Verbose output (debug logging).",
)
@click.version_option(
    __version__,
    "-v",
    "--version",
    prog_name="wg-show",
    message="%(prog)s version %(version)s",
)
@click.argument("wg_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def main(
    ctx: click.Context,
    show_table: bool,
    filter_maintainer: str | None,
    filter_group: str | None,
    sort_handshake: str | None,
    config_dir: str | None,
    settings_file: str | None,
    no_color: bool,
    verbose: bool,
    wg_args: tuple[str, ...],
) -> None:
    """Run `wg show WG_ARGS...` and annotate peers from the interface config."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s:%(name)s:%(message)s",
        )

    settings = load_settings(settings_file)
    if config_dir:
        settings.config_dir = config_dir
    if no_color:
        settings.color = False

    proc = run_wg_show(settings.wg_command, wg_args)
    output = proc.stdout or ""
    if proc.returncode != 0:
        click.echo(output, err=True, nl=False)
        ctx.exit(proc.returncode)

    annotations = find_annotations(settings, output, wg_args)
    if not annotations:
        click.echo(output, nl=False)
        return

    snapshot = parse_status(output, annotations)
    peers = select_peers(
        snapshot.peers,
        maintainer=filter_maintainer,
        group=filter_group,
        sort=sort_handshake,
    )
    styles = DEFAULT_STYLES if settings.color else PLAIN_STYLES

    if show_table:
        text = render_table(snapshot, peers, settings.layout, styles)
    else:
        text = render_annotated(output, peers, styles)

    console = Console(no_color=not settings.color, highlight=False)
    console.print(text, end="", soft_wrap=True)


if __name__ == "__main__":
    main()
