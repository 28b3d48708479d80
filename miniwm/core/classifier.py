# core/classifier.py
"""
Window admission policy.

Decides, from the WM_CLASS pair of a window, whether it may be managed and on
which workspace it lives. The rule table is an ordered list of
(pattern, workspace); the first pattern matching either the instance or the
class name (case-insensitive) wins.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union
import logging

from Xlib.error import XError

logger = logging.getLogger("miniwm.classifier")
logger.addHandler(logging.NullHandler())

WMClass = Tuple[Optional[str], Optional[str]]
Rule = Tuple[str, int]


@dataclass(frozen=True)
class Rejected:
    """Window is not on any allow-list."""


@dataclass(frozen=True)
class Assigned:
    workspace: int


ClassificationResult = Union[Rejected, Assigned]

REJECTED = Rejected()


def build_rules(allow_lists: Sequence[Iterable[str]]) -> List[Rule]:
    """Flatten per-workspace allow-lists into the ordered rule table."""
    rules: List[Rule] = []
    for workspace, patterns in enumerate(allow_lists):
        for pattern in patterns:
            rules.append((pattern.lower(), workspace))
    return rules


def classify(wm_class: Optional[WMClass], rules: Sequence[Rule]) -> ClassificationResult:
    if not wm_class:
        return REJECTED
    instance, klass = wm_class
    names = {n.lower() for n in (instance, klass) if n}
    if not names:
        return REJECTED
    for pattern, workspace in rules:
        if pattern.lower() in names:
            return Assigned(workspace)
    return REJECTED


def read_wm_class(window) -> Optional[WMClass]:
    """
    Fetch WM_CLASS from the server. A vanished window or a malformed property
    gives None, which the policy treats as a rejection.
    """
    try:
        value = window.get_wm_class()
    except XError:
        logger.debug("WM_CLASS unreadable for %s", getattr(window, "id", window))
        return None
    except (UnicodeDecodeError, ValueError):
        logger.debug("malformed WM_CLASS on %s", getattr(window, "id", window))
        return None
    if not value or len(value) != 2:
        return None
    return value[0], value[1]
