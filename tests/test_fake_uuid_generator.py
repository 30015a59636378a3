import pytest

from boshutils.fake_uuid_generator import FakeGenerator


def test_counts_up_by_default():
    gen = FakeGenerator()
    assert gen.generate() == "fake-uuid-0"
    assert gen.generate() == "fake-uuid-1"
    assert gen.next_uuid == 2


def test_returns_fixed_uuid():
    gen = FakeGenerator(generated_uuid="my-uuid")
    assert gen.generate() == "my-uuid"
    assert gen.generate() == "my-uuid"
    assert gen.next_uuid == 0


def test_raises_configured_error():
    gen = FakeGenerator(generate_error=RuntimeError("boom"))
    with pytest.raises(RuntimeError, match="boom"):
        gen.generate()
    assert gen.next_uuid == 0


def test_counter_starts_at_given_value():
    gen = FakeGenerator(next_uuid=7)
    assert gen.generate() == f"fake-uuid-{7}"