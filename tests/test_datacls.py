import copy
import hashlib

import pytest
from Crypto.PublicKey import RSA

from keyforge.crypto import crt_values, fingerprint, scrubbed
from keyforge.datacls import RSAKeyPair, public_key_of
from keyforge.errors import GenerationError


def test_generate_respects_size():
    pair = RSAKeyPair.generate(2048)
    assert pair.bits == 2048
    assert pair.private_key.has_private()
    assert pair.private_key.e == 65537


@pytest.mark.parametrize("bits", [0, -1, -2048])
def test_generate_rejects_non_positive_size(bits):
    with pytest.raises(GenerationError):
        RSAKeyPair.generate(bits)


@pytest.mark.parametrize("bits", ["2048", 2048.0, True, None])
def test_generate_rejects_non_integer_size(bits):
    with pytest.raises(GenerationError):
        RSAKeyPair.generate(bits)


def test_generate_rejects_unsupported_size():
    with pytest.raises(GenerationError) as info:
        RSAKeyPair.generate(512)
    assert isinstance(info.value.__cause__, ValueError)


def test_generate_reports_entropy_failure():
    def broken_randfunc(n):
        raise OSError("entropy source unavailable")

    with pytest.raises(GenerationError) as info:
        RSAKeyPair.generate(1024, randfunc=broken_randfunc)
    assert isinstance(info.value.__cause__, OSError)


def test_public_key_is_derived(pair, rsa_key):
    public = public_key_of(pair)
    assert not public.has_private()
    assert public.n == rsa_key.n
    assert public.e == rsa_key.e
    assert public == RSA.construct((rsa_key.n, rsa_key.e))
    assert pair.public_key == public


def test_pair_requires_private_key(rsa_key):
    with pytest.raises(ValueError):
        RSAKeyPair(rsa_key.publickey())


def test_pair_equality(rsa_key):
    assert RSAKeyPair(rsa_key) == RSAKeyPair(rsa_key)
    assert RSAKeyPair(rsa_key) != "not a pair"


def test_pair_cannot_be_copied(pair):
    with pytest.raises(TypeError):
        copy.copy(pair)
    with pytest.raises(TypeError):
        copy.deepcopy(pair)


def test_repr_hides_secrets(pair, rsa_key):
    text = repr(pair)
    assert "bits=1024" in text
    assert str(rsa_key.d) not in text
    assert str(rsa_key.p) not in text


def test_context_manager_wipes(rsa_key):
    with RSAKeyPair(rsa_key) as pair:
        assert pair.bits == 1024
    assert pair.wiped
    assert pair.private_key is None
    assert repr(pair) == "RSAKeyPair(<wiped>)"
    with pytest.raises(ValueError):
        pair.public_key
    assert pair != RSAKeyPair(rsa_key)


def test_fingerprint_hashes_public_part(pair, rsa_key):
    expected = hashlib.sha256(rsa_key.publickey().export_key(format="DER")).hexdigest()
    assert pair.fingerprint() == expected
    assert fingerprint(rsa_key.publickey()) == expected


def test_crt_values(rsa_key):
    dp, dq, qinv = crt_values(rsa_key)
    assert dp == rsa_key.d % (rsa_key.p - 1)
    assert dq == rsa_key.d % (rsa_key.q - 1)
    assert (qinv * rsa_key.q) % rsa_key.p == 1


def test_scrubbed_zeroes_buffer():
    buffer = bytearray(b"secret material")
    with scrubbed(buffer) as buf:
        assert bytes(buf) == b"secret material"
    assert buffer == bytearray(len(b"secret material"))


def test_scrubbed_zeroes_buffer_on_error():
    buffer = bytearray(b"secret")
    with pytest.raises(RuntimeError):
        with scrubbed(buffer):
            raise RuntimeError("boom")
    assert not any(buffer)
