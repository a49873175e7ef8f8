import pytest

from roomforge.rng import RNGManager


def test_same_seed_same_streams():
    a = RNGManager("room-7").context_rng("platforms")
    b = RNGManager("room-7").context_rng("platforms")
    assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]


def test_domains_are_independent():
    rngm = RNGManager(123)
    assert rngm.derive_seed("platforms") != rngm.derive_seed("decorations")


def test_hex_seed_matches_int_seed():
    assert RNGManager("0xff").get_master_seed_hex() == RNGManager(255).get_master_seed_hex()


def test_random_seed_when_none():
    rngm = RNGManager(None)
    assert len(rngm.get_master_seed_hex()) == 32


def test_phase_seed_depends_only_on_master_seed_and_phase():
    assert RNGManager("room-7").derive_seed("platforms") == RNGManager("room-7").derive_seed("platforms")
    with pytest.raises(TypeError):
        RNGManager("room-7").context_rng("platforms", 3)
