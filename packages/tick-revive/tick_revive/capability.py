"""Capability gate: decides once whether the guard applies at all."""
from __future__ import annotations

import re
from typing import Mapping

from tick_revive.config import RevivalConfig
from tick_revive.types import CapabilityProfile

_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


def _leading_int(part: str) -> int:
    match = _LEADING_INT_RE.match(part)
    return int(match.group(1)) if match else 0


def parse_version(version: str) -> tuple[int, int]:
    """Return (major, minor) from a dotted version string.

    Components that do not start with digits count as 0, so ``"1.9-pre2"``
    parses as (1, 9) and ``"snapshot"`` as (0, 0).
    """
    parts = version.split(".")
    major = _leading_int(parts[0])
    minor = _leading_int(parts[1]) if len(parts) > 1 else 0
    return major, minor


def offhand_supported(version: str, minimum: tuple[int, int] = (1, 9)) -> bool:
    major, minor = parse_version(version)
    min_major, min_minor = minimum
    return major > min_major or (major == min_major and minor >= min_minor)


def detect_capabilities(
    items_by_name: Mapping[str, int],
    version: str,
    config: RevivalConfig | None = None,
) -> CapabilityProfile:
    """Build the CapabilityProfile for a game-data revision and protocol version.

    A missing item or an unsupported version is a normal outcome, not an
    error; callers check ``profile.supported``.
    """
    cfg = config if config is not None else RevivalConfig()
    return CapabilityProfile(
        revival_item_id=items_by_name.get(cfg.item_name),
        offhand_supported=offhand_supported(version, cfg.min_offhand_version),
    )
