"""Short code generation utilities."""

import secrets
import string
import uuid
from typing import Optional


class ShortCodeGenerator:
    """Generate short codes for URLs.

    Codes are random base62 tokens. Uniqueness is not guaranteed here;
    the service writes them with SET NX and draws again on collision.
    """

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    def __init__(self, default_length: int = 6):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
        """
        if default_length < 1:
            raise ValueError("default_length must be positive")
        self.default_length = default_length

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(secrets.choice(self.BASE62_CHARS) for _ in range(length))

    def generate_from_uuid(self, length: Optional[int] = None) -> str:
        """Generate short code from a random UUID.

        Used as a last resort after repeated collisions, usually with a
        longer length than the default.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Short code based on UUID
        """
        length = length or self.default_length
        code = self._int_to_base62(uuid.uuid4().int)
        return code[:length]

    def _int_to_base62(self, num: int) -> str:
        """Convert integer to base62 string."""
        if num == 0:
            return self.BASE62_CHARS[0]

        result = []
        base = len(self.BASE62_CHARS)

        while num > 0:
            num, remainder = divmod(num, base)
            result.append(self.BASE62_CHARS[remainder])

        return ''.join(reversed(result))
