"""URL slug helpers shared by products and collections."""

import re
import unicodedata

from protean.exceptions import ValidationError

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(text: str) -> str:
    """Lowercase, strip accents, and collapse everything else into single hyphens."""
    normalized = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower())
    return slug.strip("-")


def validate_slug(slug: str) -> None:
    if not slug:
        raise ValidationError({"slug": ["Slug is required"]})

    if not re.match(r"^[a-z0-9-]+$", slug):
        raise ValidationError({"slug": ["Slug must contain only lowercase alphanumeric characters and hyphens"]})

    if not _SLUG_PATTERN.match(slug):
        raise ValidationError({"slug": ["Slug must not start or end with a hyphen or contain consecutive hyphens"]})


def unique_slug(base: str, is_taken) -> str:
    """Return `base`, or `base-1`, `base-2`, ... whichever `is_taken` rejects first."""
    candidate = base
    suffix = 0
    while is_taken(candidate):
        suffix += 1
        candidate = f"{base}-{suffix}"
    return candidate
