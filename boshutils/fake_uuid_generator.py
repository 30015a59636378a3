"""A predictable UUID generator for tests."""

from __future__ import annotations

from dataclasses import dataclass

from boshutils.uuid_generator import Generator


@dataclass
class FakeGenerator(Generator):
    """Returns a fixed UUID, raises a fixed error, or counts up ``fake-uuid-N``."""

    generated_uuid: str = ""
    next_uuid: int = 0
    generate_error: BaseException | None = None

    def generate(self) -> str:
        if self.generate_error is not None:
            raise self.generate_error
        if self.generated_uuid:
            return self.generated_uuid
        value = f"fake-uuid-{self.next_uuid}"
        self.next_uuid += 1
        return value