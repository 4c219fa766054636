"""Slug generation for catalog entities.

``slugify`` turns a display name into a lowercase URL-safe key.
``SlugGenerator`` adds collision avoidance by checking the store for
``base``, ``base-1``, ``base-2``, ... until a free slug is found.

The lookup is a check-then-act sequence. Callers persist under the
unique index on the slug column and regenerate on an integrity
conflict, see ``ProductAdminService``.
"""

import re
import unicodedata
from collections.abc import Awaitable, Callable

from storefront.domain.exceptions import ValidationError

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[-\s_]+")

SlugExists = Callable[[str, str | None], Awaitable[bool]]


def slugify(value: str) -> str:
    """Normalize a name into a slug.

    Accents are folded to ASCII, everything is lowercased, runs of
    whitespace, dashes and underscores collapse to a single dash, and
    any other punctuation is dropped.

    Examples:
        >>> slugify("Electronics ")
        'electronics'
        >>> slugify("Café  Crème -- Deluxe!")
        'cafe-creme-deluxe'

    Args:
        value: Human-readable name.

    Returns:
        Slug, possibly empty if the name has no letters or digits.
    """
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = _NON_SLUG_CHARS.sub("", value.lower())
    return _SEPARATORS.sub("-", value).strip("-")


def require_slug(name: str, field: str = "name", max_length: int | None = None) -> str:
    """Slugify a name, rejecting names that produce an empty slug.

    Raises:
        ValidationError: If the name has no letters or digits, or its
            slug is longer than ``max_length``.
    """
    slug = slugify(name)
    if not slug:
        raise ValidationError(
            f"{field.capitalize()} must contain letters or digits",
            field=field,
        )
    if max_length is not None and len(slug) > max_length:
        raise ValidationError(
            f"{field.capitalize()} must be at most {max_length} characters",
            field=field,
        )
    return slug


class SlugGenerator:
    """Allocates unique slugs against a store.

    Example usage:
        generator = SlugGenerator(product_repo.slug_exists)
        slug = await generator.generate("Gaming Laptop")  # gaming-laptop[-N]
    """

    def __init__(self, exists: SlugExists, max_length: int | None = None) -> None:
        """Initialize with an existence check.

        Args:
            exists: Coroutine ``(slug, exclude_id) -> bool`` reporting
                whether another entity already holds the slug.
            max_length: Longest accepted base slug, before any suffix.
        """
        self.exists = exists
        self.max_length = max_length

    async def generate(self, name: str, exclude_id: str | None = None) -> str:
        """Generate the first free slug for a name.

        Args:
            name: Entity name.
            exclude_id: Entity being renamed; its own slug is not a collision.

        Returns:
            ``base`` if free, else ``base-N`` for the smallest free N >= 1.
        """
        base = require_slug(name, max_length=self.max_length)
        candidate = base
        suffix = 1

        while await self.exists(candidate, exclude_id):
            candidate = f"{base}-{suffix}"
            suffix += 1

        return candidate
