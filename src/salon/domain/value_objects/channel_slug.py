"""
ChannelSlug value object - URL-safe channel identifier derived from a name.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class ChannelSlug:
    """
    Value object representing a validated channel slug.

    Slug rules:
    - Lowercase letters and digits of any script separated by single
      hyphens
    - No leading or trailing hyphen
    - Maximum 120 characters

    Examples:
        - general
        - off-topic
        - team-42-standup
        - 日本語
    """

    value: str

    PATTERN: ClassVar[re.Pattern] = re.compile(r"^[^\W_]+(?:-[^\W_]+)*$")
    SEPARATORS: ClassVar[re.Pattern] = re.compile(r"[\W_]+")
    MAX_LENGTH: ClassVar[int] = 120

    def __post_init__(self):
        """Validate slug on creation."""
        if not self.value:
            raise ValueError("Slug must contain at least one letter or digit")

        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(f"Slug too long (max {self.MAX_LENGTH} characters)")

        if self.value != self.value.lower() or not self.PATTERN.match(self.value):
            raise ValueError(
                "Slug must contain only lowercase letters and digits "
                "separated by single hyphens"
            )

    @classmethod
    def from_name(cls, name: str) -> "ChannelSlug":
        """
        Derive a slug from a channel name.

        Accented Latin letters are folded to ASCII, letters of other
        scripts are kept, everything is lowercased and each run of other
        characters collapses into one hyphen.

        Args:
            name: Channel name

        Returns:
            ChannelSlug

        Raises:
            ValueError: If the name has no letter or digit left
        """
        folded = "".join(_fold(ch) for ch in name).lower()
        slug = cls.SEPARATORS.sub("-", folded).strip("-")
        return cls(slug[: cls.MAX_LENGTH].rstrip("-"))

    def __str__(self) -> str:
        return self.value


def _fold(ch: str) -> str:
    # "é" -> "e", "ﬁ" -> "fi"; "が" stays, its base would change the word
    stripped = "".join(
        c for c in unicodedata.normalize("NFKD", ch) if not unicodedata.combining(c)
    )
    return stripped if stripped.isascii() else ch
