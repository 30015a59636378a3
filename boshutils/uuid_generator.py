"""UUID generation."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod


class Generator(ABC):
    """Produces unique identifier strings."""

    @abstractmethod
    def generate(self) -> str:
        """Return a new identifier."""


class UuidV4Generator(Generator):
    """Generates random version 4 UUIDs in canonical lower-case form."""

    def generate(self) -> str:
        return str(uuid.uuid4())