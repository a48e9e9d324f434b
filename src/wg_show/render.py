# SPDX-FileCopyrightText: Copyright (C) 2026 The wg-show Authors
# SPDX-License-Identifier: AGPL-3.0-only

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from rich.text import Text

from .snapshot import InterfaceSnapshot, PeerSnapshot

ELLIPSIS = "..."
RULE_CHAR = "─"
NO_PEERS = "No peers found."

Styles = Mapping[str, str]

DEFAULT_STYLES: Styles = MappingProxyType({
    "interface": "cyan",
    "peer": "yellow",
    "nickname": "green",
    "maintainer": "bold blue",
    "group": "magenta",
    "endpoint": "yellow",
    "handshake": "",
    "title": "bold cyan",
    "label": "bold white",
})

PLAIN_STYLES: Styles = MappingProxyType({role: "" for role in DEFAULT_STYLES})


@dataclass(frozen=True)
class Column:
    header: str
    width: int
    style: str


@dataclass(frozen=True)
class TableLayout:
    nickname: int = 20
    maintainer: int = 15
    group: int = 15
    endpoint: int = 30
    handshake: int = 20
    rule: int = 120

    @property
    def columns(self) -> tuple[Column, ...]:
        return (
            Column("Nickname", self.nickname, "nickname"),
            Column("Maintainer", self.maintainer, "maintainer"),
            Column("Group", self.group, "group"),
            Column("Endpoint", self.endpoint, "endpoint"),
            Column("Handshake", self.handshake, "handshake"),
        )


def truncate(value: str, width: int) -> str:
    if len(value) <= width:
        return value
    if width <= len(ELLIPSIS):
        return value[:width]
    return value[:width - len(ELLIPSIS)] + ELLIPSIS


def pad_right(value: str, width: int) -> str:
    return value.ljust(width)


def _style(styles: Styles, role: str) -> str:
    return styles.get(role, "")


def render_annotated(
    output: str,
    peers: Iterable[PeerSnapshot],
    styles: Styles = DEFAULT_STYLES,
) -> Text:
    """Status text with nickname, maintainer and group under each peer.

    The interface header is echoed as reported, up to the first peer.
    Peers are then written in the order given, each with its original
    lines. Further interfaces in the output are passed through unchanged.
    """
    lines = output.splitlines()
    rest = _second_interface_index(lines)
    text = Text()
    for line in lines[:rest]:
        trimmed = line.strip()
        if trimmed.startswith("peer:"):
            break
        if trimmed.startswith("interface:"):
            name = trimmed[len("interface:"):].strip()
            text.append(f"interface: {name}", style=_style(styles, "interface"))
        else:
            text.append(line)
        text.append("\n")

    for peer in peers:
        text.append(f"peer: {peer.public_key}", style=_style(styles, "peer"))
        text.append("\n")
        for role in ("nickname", "maintainer", "group"):
            value = getattr(peer, role)
            if value:
                text.append(f"  {role}: ")
                text.append(value, style=_style(styles, role))
                text.append("\n")
        for line in peer.lines:
            text.append(line)
            text.append("\n")
        text.append("\n")

    for line in lines[rest:]:
        text.append(line)
        text.append("\n")

    return text


def _second_interface_index(lines: list[str]) -> int:
    headers = [
        index for index, line in enumerate(lines)
        if line.strip().startswith("interface:")
    ]
    if len(headers) < 2:
        return len(lines)
    return headers[1]


def _row_values(peer: PeerSnapshot) -> tuple[str, ...]:
    nickname = peer.nickname or peer.public_key[:16] + ELLIPSIS
    return (
        nickname,
        peer.maintainer or "-",
        peer.group or "-",
        peer.endpoint or "-",
        peer.latest_handshake or "-",
    )


def render_table(
    snapshot: InterfaceSnapshot,
    peers: Iterable[PeerSnapshot],
    layout: TableLayout = TableLayout(),
    styles: Styles = DEFAULT_STYLES,
) -> Text:
    label = _style(styles, "label")
    text = Text()
    text.append("Interface: ", style=_style(styles, "title"))
    text.append(f"{snapshot.name}\n")
    if snapshot.public_key:
        text.append("Public Key: ", style=label)
        text.append(f"{snapshot.public_key}\n")
    if snapshot.listening_port:
        text.append("Listening Port: ", style=label)
        text.append(f"{snapshot.listening_port}\n")
    text.append("\n")

    peers = list(peers)
    if not peers:
        text.append(f"{NO_PEERS}\n")
        return text

    columns = layout.columns
    rule = RULE_CHAR * layout.rule + "\n"
    header = " ".join(
        pad_right(truncate(column.header, column.width), column.width)
        for column in columns
    )

    text.append("Peers:\n", style=label)
    text.append(rule)
    text.append(header, style=label)
    text.append("\n")
    text.append(rule)

    for peer in peers:
        cells = []
        for column, value in zip(columns, _row_values(peer)):
            cells.append(
                Text(pad_right(truncate(value, column.width), column.width),
                     style=_style(styles, column.style))
            )
        text.append_text(Text(" ").join(cells))
        text.append("\n")
        if peer.allowed_ips:
            text.append(f"  Allowed IPs: {peer.allowed_ips}\n")
        if peer.transfer:
            text.append(f"  Transfer: {peer.transfer}\n")
        text.append("\n")

    return text
