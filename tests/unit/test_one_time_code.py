"""Tests for one-time code generation and bcrypt verification."""

import pytest

from app.application.services.one_time_code import OneTimeCodeService


@pytest.fixture
def codes() -> OneTimeCodeService:
    return OneTimeCodeService(rounds=4)


def test_generate_is_zero_padded_digits(codes: OneTimeCodeService) -> None:
    for _ in range(50):
        code = codes.generate()
        assert len(code) == 6
        assert code.isdigit()


def test_generate_custom_length() -> None:
    assert len(OneTimeCodeService(length=8, rounds=4).generate()) == 8
    assert len(OneTimeCodeService(rounds=4).generate(4)) == 4


def test_generate_varies(codes: OneTimeCodeService) -> None:
    assert len({codes.generate() for _ in range(20)}) > 1


async def test_hash_is_not_the_code(codes: OneTimeCodeService) -> None:
    code_hash = await codes.hash("482913")
    assert "482913" not in code_hash
    assert code_hash.startswith("$2")


async def test_matches_correct_code_only(codes: OneTimeCodeService) -> None:
    code_hash = await codes.hash("482913")
    assert await codes.matches("482913", code_hash)
    assert not await codes.matches("482914", code_hash)


async def test_same_code_hashes_differently(codes: OneTimeCodeService) -> None:
    """Salted hashes: equal codes never produce equal stored values."""
    assert await codes.hash("000111") != await codes.hash("000111")


@pytest.mark.parametrize(("code", "code_hash"), [("", "x"), ("123456", ""), ("123456", "not-bcrypt")])
async def test_malformed_input_never_matches(
    codes: OneTimeCodeService, code: str, code_hash: str
) -> None:
    assert not await codes.matches(code, code_hash)
