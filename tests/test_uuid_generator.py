import re

import pytest

from boshutils.uuid_generator import Generator, UuidV4Generator

UUID_FORMAT = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


def test_generate_matches_format():
    value = UuidV4Generator().generate()
    assert len(value) == 36
    match = UUID_FORMAT.fullmatch(value)
    assert match is not None and match.group(0) == value


def test_generate_is_version_4():
    value = UuidV4Generator().generate()
    assert value[14] == "4"
    assert value[19] in "89ab"


def test_generate_is_unique():
    generator = UuidV4Generator()
    values = {generator.generate() for _ in range(50)}
    assert len(values) == 50


def test_generator_is_abstract():
    with pytest.raises(TypeError):
        Generator()