# SPDX-FileCopyrightText: Copyright (C) 2026 The wg-show Authors
# SPDX-License-Identifier: AGPL-3.0-only

"""Recover peer annotations from comments in a WireGuard configuration.

Annotations are written as comments above a ``[Peer]`` section::

    # Office
    ## Alice laptop (@bob)
    [Peer]
    PublicKey = ...

The ``##`` line names the peer (with an optional maintainer handle), and
the nearest single ``#`` comment above it names the group shared by the
following peers.
"""

import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)

PEER_MARKER = "[Peer]"
INTERFACE_MARKER = "[Interface]"
PUBLIC_KEY_DIRECTIVE = "PublicKey"

WG_PARAMETERS = (
    "Address",
    "DNS",
    "MTU",
    "Table",
    "PreUp",
    "PostUp",
    "PreDown",
    "PostDown",
    "SaveConfig",
    "FwMark",
    "ListenPort",
    "PrivateKey",
    "PublicKey",
    "AllowedIPs",
    "Endpoint",
    "PersistentKeepalive",
    "PresharedKey",
)
_WG_PARAMETERS_LOWER = tuple(param.lower() for param in WG_PARAMETERS)

MAINTAINER_RE = re.compile(r"\(@(\w+)\)$")


@dataclass(frozen=True)
class PeerAnnotation:
    nickname: str = ""
    group: str = ""
    maintainer: str = ""

    def __bool__(self) -> bool:
        return bool(self.nickname or self.group or self.maintainer)


class ScanState(enum.Enum):
    IDLE = "idle"
    SAW_SINGLE_COMMENT = "saw-single-comment"
    SAW_DOUBLE_COMMENT = "saw-double-comment"
    IN_PEER_AWAITING_KEY = "in-peer-awaiting-key"


def is_wg_parameter(comment: str) -> bool:
    """Tell a commented-out directive apart from a free-text annotation."""
    comment = comment.strip()
    if "=" in comment:
        key = comment.split("=", 1)[0].strip().lower()
        if key in _WG_PARAMETERS_LOWER:
            return True
    return comment.lower().startswith(_WG_PARAMETERS_LOWER)


def split_maintainer(nickname: str) -> tuple[str, str]:
    """Split ``"Alice (@bob)"`` into ``("Alice", "bob")``."""
    match = MAINTAINER_RE.search(nickname)
    if match is None:
        return nickname, ""
    return MAINTAINER_RE.sub("", nickname).strip(), match.group(1)


class AnnotationScanner:
    """Forward scan over configuration lines.

    ``state`` records what the previous line was. It is what decides
    whether a ``[Peer]`` marker gets a nickname. ``group`` is the nearest
    single-comment label seen since the last ``[Interface]`` marker and
    ``pending`` holds the annotation of a peer whose ``PublicKey`` has not
    been reached yet.
    """

    def __init__(self) -> None:
        self.state = ScanState.IDLE
        self.comment = ""
        self.group = ""
        self.pending: PeerAnnotation | None = None
        self.annotations: dict[str, PeerAnnotation] = {}

    def feed(self, raw_line: str) -> None:
        line = raw_line.strip()

        if line == INTERFACE_MARKER:
            self._drop_pending()
            self.group = ""
            self.state = ScanState.IDLE
        elif line == PEER_MARKER:
            self._drop_pending()
            self.pending = self._annotation_for_marker()
            self.state = ScanState.IN_PEER_AWAITING_KEY
        elif line.startswith("##"):
            self.comment = line[2:].strip()
            self.state = ScanState.SAW_DOUBLE_COMMENT
        elif line.startswith("#"):
            comment = line[1:].strip()
            if is_wg_parameter(comment):
                self.state = ScanState.IDLE
            else:
                self.comment = comment
                self.group = comment
                self.state = ScanState.SAW_SINGLE_COMMENT
        else:
            if self.pending is not None and line.startswith(PUBLIC_KEY_DIRECTIVE):
                self._resolve_pending(line)
            self.state = ScanState.IDLE

    def _annotation_for_marker(self) -> PeerAnnotation:
        if self.state is ScanState.SAW_DOUBLE_COMMENT:
            nickname, maintainer = split_maintainer(self.comment)
            return PeerAnnotation(nickname, self.group, maintainer)
        if self.state is ScanState.SAW_SINGLE_COMMENT:
            nickname, maintainer = split_maintainer(self.comment)
            return PeerAnnotation(nickname=nickname, maintainer=maintainer)
        return PeerAnnotation()

    def _resolve_pending(self, line: str) -> None:
        annotation, self.pending = self.pending, None
        if "=" not in line:
            return
        public_key = line.split("=", 1)[1].strip()
        if annotation:
            self.annotations[public_key] = annotation

    def _drop_pending(self) -> None:
        if self.pending:
            logger.debug("peer %r has no PublicKey, annotation dropped", self.pending.nickname)
        self.pending = None


def extract_annotations(lines: Iterable[str]) -> Mapping[str, PeerAnnotation]:
    scanner = AnnotationScanner()
    for line in lines:
        scanner.feed(line)
    logger.debug("found %d annotated peers", len(scanner.annotations))
    return MappingProxyType(scanner.annotations)


def config_path_for(config_dir: str | Path, interface: str) -> Path:
    return Path(config_dir) / f"{interface}.conf"


def read_config_lines(path: str | Path) -> list[str]:
    with open(path, "r", encoding="utf-8") as f:
        return f.read().splitlines()


def load_annotations(path: str | Path) -> Mapping[str, PeerAnnotation]:
    return extract_annotations(read_config_lines(path))
