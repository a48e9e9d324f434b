# SPDX-FileCopyrightText: Copyright (C) 2026 The wg-show Authors
# SPDX-License-Identifier: AGPL-3.0-only

import logging
import re
import sys
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from .config import PeerAnnotation

logger = logging.getLogger(__name__)

# Peers that never completed a handshake sort as the most stale.
NEVER = sys.maxsize

SORT_ASC = "asc"
SORT_DESC = "desc"

HANDSHAKE_UNITS = (
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)
_HANDSHAKE_RES = {
    unit: re.compile(rf"(\d+)\s+{unit}") for unit, _ in HANDSHAKE_UNITS
}

INTERFACE_RE = re.compile(r"^interface:\s*(\S+)")

PEER_FIELDS = {
    "endpoint:": "endpoint",
    "allowed ips:": "allowed_ips",
    "latest handshake:": "latest_handshake",
    "transfer:": "transfer",
    "persistent keepalive:": "persistent_keepalive",
}


@dataclass
class PeerSnapshot:
    public_key: str
    nickname: str = ""
    group: str = ""
    maintainer: str = ""
    endpoint: str = ""
    allowed_ips: str = ""
    latest_handshake: str = ""
    handshake_seconds: int = NEVER
    transfer: str = ""
    persistent_keepalive: str = ""
    lines: list[str] = field(default_factory=list)


@dataclass
class InterfaceSnapshot:
    name: str = ""
    public_key: str = ""
    listening_port: str = ""
    peers: list[PeerSnapshot] = field(default_factory=list)


def parse_handshake(handshake: str) -> int:
    """Convert ``"1 day, 2 hours, 3 minutes"`` into seconds.

    An empty phrase means the peer never shook hands and returns
    :data:`NEVER`. Parts that name no known unit count as zero.
    """
    if not handshake:
        return NEVER

    total_seconds = 0
    for part in handshake.split(","):
        part = part.strip()
        for unit, multiplier in HANDSHAKE_UNITS:
            if unit in part:
                match = _HANDSHAKE_RES[unit].search(part)
                if match:
                    total_seconds += int(match.group(1)) * multiplier
                break
    return total_seconds


def _value_after(line: str, prefix: str) -> str:
    return line[len(prefix):].strip()


def _new_peer(public_key: str, annotations: Mapping[str, PeerAnnotation]) -> PeerSnapshot:
    peer = PeerSnapshot(public_key=public_key)
    annotation = annotations.get(public_key)
    if annotation is not None:
        peer.nickname = annotation.nickname
        peer.group = annotation.group
        peer.maintainer = annotation.maintainer
    return peer


def _close_peer(snapshot: InterfaceSnapshot, peer: PeerSnapshot) -> None:
    while peer.lines and not peer.lines[-1].strip():
        peer.lines.pop()
    snapshot.peers.append(peer)


def parse_status(
    output: str,
    annotations: Mapping[str, PeerAnnotation] | None = None,
) -> InterfaceSnapshot:
    """Rebuild the first interface reported by ``wg show``."""
    if annotations is None:
        annotations = {}

    snapshot = InterfaceSnapshot()
    current: PeerSnapshot | None = None
    seen_interface = False

    for line in output.splitlines():
        trimmed = line.strip()

        if trimmed.startswith("interface:"):
            if seen_interface:
                logger.debug("ignoring status of further interfaces")
                break
            seen_interface = True
            snapshot.name = _value_after(trimmed, "interface:")
        elif trimmed.startswith("peer:"):
            if current is not None:
                _close_peer(snapshot, current)
            current = _new_peer(_value_after(trimmed, "peer:"), annotations)
        elif current is None:
            if trimmed.startswith("public key:"):
                snapshot.public_key = _value_after(trimmed, "public key:")
            elif trimmed.startswith("listening port:"):
                snapshot.listening_port = _value_after(trimmed, "listening port:")
        else:
            current.lines.append(line)
            for prefix, attr in PEER_FIELDS.items():
                if trimmed.startswith(prefix):
                    value = _value_after(trimmed, prefix)
                    setattr(current, attr, value)
                    if attr == "latest_handshake":
                        current.handshake_seconds = parse_handshake(value)
                    break

    if current is not None:
        _close_peer(snapshot, current)

    return snapshot


def extract_interface_name(output: str, wg_args: Iterable[str] = ()) -> str:
    """Name of the interface the status refers to.

    The first argument forwarded to ``wg show`` wins, then the first
    ``interface:`` header of the output.
    """
    for arg in wg_args:
        return arg
    for line in output.splitlines():
        match = INTERFACE_RE.match(line)
        if match:
            return match.group(1)
    return ""


def should_show_peer(
    peer: PeerSnapshot,
    maintainer: str | None = None,
    group: str | None = None,
) -> bool:
    if maintainer and peer.maintainer != maintainer:
        return False
    if group and peer.group != group:
        return False
    return True


def select_peers(
    peers: Iterable[PeerSnapshot],
    maintainer: str | None = None,
    group: str | None = None,
    sort: str | None = None,
) -> list[PeerSnapshot]:
    selected = [peer for peer in peers if should_show_peer(peer, maintainer, group)]
    if sort == SORT_ASC:
        selected.sort(key=lambda peer: peer.handshake_seconds)
    elif sort == SORT_DESC:
        selected.sort(key=lambda peer: peer.handshake_seconds, reverse=True)
    elif sort is not None:
        raise ValueError(f"unknown sort order: {sort!r}")
    return selected
