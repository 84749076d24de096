import pytest

from hpingtools.rc4 import Rc4Random


def test_identity_first_output():
    gen = Rc4Random.identity()
    assert gen.rand().to_bytes(4, "little") == bytes([2, 5, 7, 13])


def test_identity_is_deterministic():
    a = Rc4Random.identity()
    b = Rc4Random.identity()
    assert [a.rand() for _ in range(50)] == [b.rand() for _ in range(50)]


def test_state_stays_a_permutation():
    gen = Rc4Random.identity()
    for _ in range(200):
        value = gen.rand()
        assert 0 <= value < 2 ** 32
    assert sorted(gen.sbox) == list(range(256))


def test_seed_changes_output():
    plain = Rc4Random.identity()
    seeded = Rc4Random.identity()
    seeded.seed(b"some seed bytes")
    assert [plain.rand() for _ in range(8)] != [seeded.rand() for _ in range(8)]


def test_seed_is_reproducible():
    a = Rc4Random.identity()
    b = Rc4Random.identity()
    a.seed(b"abc")
    b.seed(b"abc")
    assert [a.rand() for _ in range(10)] == [b.rand() for _ in range(10)]


def test_empty_seed_only_discards_outputs():
    seeded = Rc4Random.identity()
    seeded.seed(b"")
    reference = Rc4Random.identity()
    for _ in range(32):
        reference.rand()
    assert seeded.rand() == reference.rand()


@pytest.mark.parametrize("size", [0, 255, 257])
def test_bad_sbox_length(size):
    with pytest.raises(ValueError):
        Rc4Random(bytes(size))


def test_from_entropy_produces_32bit_values():
    gen = Rc4Random.from_entropy()
    assert len(gen.sbox) == 256
    values = [gen.rand() for _ in range(20)]
    assert all(0 <= v < 2 ** 32 for v in values)