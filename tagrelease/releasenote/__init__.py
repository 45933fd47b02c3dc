"""Release note generation module."""

from .association import ABUSE_LIMIT_BATCH_SIZE, batched, dedupe, resolve
from .generator import generate, publish
from .grouping import classify, classify_one, sort_group, sort_groups
from .history import walk
from .protocol import ReleaseClient
from .render import render, render_section

__all__ = [
    "ABUSE_LIMIT_BATCH_SIZE",
    "batched",
    "dedupe",
    "resolve",
    "generate",
    "publish",
    "classify",
    "classify_one",
    "sort_group",
    "sort_groups",
    "walk",
    "ReleaseClient",
    "render",
    "render_section",
]
