"""Normalisation of raw model output into the configured message style."""

from __future__ import annotations

import re

from .analysis import COMMIT_TYPE_NAMES, ChangeAnalysis
from .config import Config

CONVENTIONAL_RE = re.compile(
    r"^(" + "|".join(COMMIT_TYPE_NAMES) + r")(\(.+\))?: .+"
)


def is_conventional(message: str) -> bool:
    """Structural check for ``type(scope): description``.

    Length and language of the description are not checked.
    """
    return bool(CONVENTIONAL_RE.match(message))


def format_commit_message(raw: str, analysis: ChangeAnalysis, config: Config) -> str:
    # Empty text stays empty so formatting remains idempotent.
    if not raw or is_conventional(raw):
        return raw
    if config.style == "conventional":
        scope = f"({analysis.scope})" if analysis.scope else ""
        return f"{analysis.type}{scope}: {raw}"
    return raw
