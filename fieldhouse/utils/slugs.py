"""URL-safe slug and short-code generation."""

from __future__ import annotations

import logging
import re
import secrets
import string
from typing import Awaitable, Callable

from fieldhouse.core.config import settings
from fieldhouse.core.exceptions import ConflictError

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

CODE_ALPHABET = string.ascii_uppercase + string.digits

ExistsCheck = Callable[[str], Awaitable[bool]]


def slugify(name: str, fallback: str) -> str:
    """Convert a display name to a slug.

    Args:
        name: Display name (e.g. "Riverside Park!!").
        fallback: Word used when nothing URL-safe is left (e.g. "facility").

    Returns:
        Slug made of ``[a-z0-9-]`` (e.g. "riverside-park").
    """
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or fallback


def is_valid_slug(value: str) -> bool:
    return bool(SLUG_PATTERN.match(value))


async def allocate_slug(
    name: str,
    exists: ExistsCheck,
    fallback: str,
    max_attempts: int | None = None,
) -> str:
    """
    Derive a slug from ``name`` that ``exists`` reports as free.

    Tries ``base``, ``base-1``, ``base-2``... in order. ``exists`` is the
    scope's uniqueness check (e.g. "facility slug taken in this org").
    Raises ConflictError once ``max_attempts`` candidates are all taken.
    """
    if max_attempts is None:
        max_attempts = settings.SLUG_MAX_ATTEMPTS

    base = slugify(name, fallback)
    candidate = base
    for attempt in range(max_attempts):
        if attempt:
            candidate = f"{base}-{attempt}"
        if not await exists(candidate):
            return candidate

    logger.warning("Slug space exhausted for base=%r after %d attempts", base, max_attempts)
    raise ConflictError("SLUG_TAKEN", f"Could not find a free identifier for '{name}'")


def generate_code(length: int = 7) -> str:
    """Random uppercase alphanumeric code, e.g. "K3F9QZ2"."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


async def allocate_code(
    exists: ExistsCheck, length: int = 7, max_attempts: int | None = None
) -> str:
    """Random code that ``exists`` reports as free."""
    if max_attempts is None:
        max_attempts = settings.SLUG_MAX_ATTEMPTS

    for _ in range(max_attempts):
        code = generate_code(length)
        if not await exists(code):
            return code

    raise ConflictError("SLUG_TAKEN", "Could not generate a free code")
