import re
import unicodedata
from typing import Optional

SEPARATOR = "-"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """
    Converts a display name into a URL-safe identifier.

    Accents are stripped from letters, the result is lowercased,
    every run of characters outside ``[a-z0-9]`` becomes a single separator,
    and separators at either end are stripped. Applying it to its own output
    returns the same string.

    Args:
        value (str): The display name (category name or report title).

    Returns:
        str: The slug, e.g. ``"Global Energy Outlook"`` -> ``"global-energy-outlook"``.
            May be empty when the name has no letters or digits.
    """
    # Drop accents only; other non-ASCII characters (dashes, symbols) act as separators
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM.sub(SEPARATOR, base.lower()).strip(SEPARATOR)


def resolve_slug(
    source: str,
    current_slug: Optional[str] = None,
    requested_slug: Optional[str] = None,
    source_changed: bool = False,
) -> str:
    """
    Decides which slug an entity should carry before it is persisted.

    An explicitly requested slug always wins (normalized). Otherwise the slug
    is derived from ``source`` when the entity has none yet or its source name
    changed; an existing slug whose source name is unchanged is kept as is.

    Raises:
        ValueError: If the resulting slug would be empty.
    """
    if requested_slug is not None:
        slug = slugify(requested_slug)
    elif current_slug and not source_changed:
        return current_slug
    else:
        slug = slugify(source)

    if not slug:
        raise ValueError(f"'{source}' does not produce a usable slug; it needs at least one letter or digit.")
    return slug
