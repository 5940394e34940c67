"""Slug generation utilities."""

import random
import string
from typing import Optional


class SlugGenerator:
    """Generate random slugs for links."""

    # URL-safe alphabet (same set nanoid uses)
    ALPHABET = string.ascii_letters + string.digits + "-_"

    def __init__(self, min_length: int = 5, max_length: int = 8):
        """Initialize slug generator.

        Args:
            min_length: Shortest slug generate() may return
            max_length: Longest slug generate() may return
        """
        if min_length < 1 or max_length < min_length:
            raise ValueError(
                f"Invalid slug length range: {min_length}-{max_length}"
            )
        self.min_length = min_length
        self.max_length = max_length
        self._random = random.SystemRandom()

    def generate(self) -> str:
        """Generate a slug whose length is drawn uniformly from the range.

        Returns:
            Random slug
        """
        length = self._random.randint(self.min_length, self.max_length)
        return self.generate_random(length)

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random slug of a fixed length.

        Args:
            length: Length of the slug (uses max_length if not specified)

        Returns:
            Random slug
        """
        length = length or self.max_length
        return ''.join(self._random.choices(self.ALPHABET, k=length))

    @staticmethod
    def is_valid_format(slug: str) -> bool:
        """Check that every character of the slug is in the alphabet."""
        return bool(slug) and all(c in SlugGenerator.ALPHABET for c in slug)
