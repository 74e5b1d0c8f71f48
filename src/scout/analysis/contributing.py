"""Contributing-guide extraction from README text."""

import re
from typing import Optional


# From a "# Contributing" or "## Contributing" heading up to the next
# first- or second-level heading, or the end of the text.
CONTRIBUTING_PATTERN = re.compile(
    r"##? Contributing[\s\S]*?(?=\n## |\n# |\Z)",
    re.IGNORECASE,
)


def extract_contributing_section(readme: Optional[str]) -> Optional[str]:
    """Return the Contributing section of a README, if it has one.

    The result is always a substring of the README.

    Args:
        readme: Raw README text, None when the repository has no README.

    Returns:
        The trimmed section including its heading, or None.
    """
    if not readme:
        return None

    match = CONTRIBUTING_PATTERN.search(readme)
    if match is None:
        return None

    section = match.group(0).strip()
    return section or None
