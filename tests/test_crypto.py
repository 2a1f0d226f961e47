import os

import pytest

from fidoexp.core.crypto import (
    aes_cmac,
    aes_cmac8,
    aes_decode,
    aes_encode,
    sha256,
    truncate_cmac,
)
from fidoexp.core.errors import CipherKeyError, CipherOperationError, ExchangeStatus

KEY = bytes.fromhex("2B7E151628AED2A6ABF7158809CF4F3C")
IV = bytes.fromhex("000102030405060708090A0B0C0D0E0F")
PLAIN = bytes.fromhex(
    "6BC1BEE22E409F96E93D7E117393172A"
    "AE2D8A571E03AC9C9EB76FAC45AF8E51"
    "30C81C46A35CE411E5FBC1191A0A52EF"
    "F69F2445DF4F9B17AD2B417BE66C3710"
)


def test_cbc_encrypt_known_vector():
    # NIST SP 800-38A F.2.1
    expected = bytes.fromhex(
        "7649ABAC8119B246CEE98E9B12E9197D"
        "5086CB9B507219EE95DB113A917678B2"
        "73BED6B8E3C1743B7116E69E22229516"
        "3FF1CAA1681FAC09120ECA307586E1A7"
    )
    assert aes_encode(KEY, PLAIN, IV) == expected
    assert aes_decode(KEY, expected, IV) == PLAIN


def test_default_iv_is_zero():
    assert aes_encode(KEY, PLAIN) == aes_encode(KEY, PLAIN, b"\x00" * 16)
    assert aes_encode(KEY, PLAIN) != aes_encode(KEY, PLAIN, IV)


@pytest.mark.parametrize("blocks", [1, 2, 5, 16])
@pytest.mark.parametrize("iv", [None, IV])
def test_cbc_round_trip(blocks, iv):
    key = os.urandom(16)
    plain = os.urandom(16 * blocks)
    cipher = aes_encode(key, plain, iv)
    assert len(cipher) == len(plain)
    assert aes_decode(key, cipher, iv) == plain


@pytest.mark.parametrize("key", [b"", bytes(15), bytes(24), bytes(32)])
def test_bad_key_is_key_error(key):
    with pytest.raises(CipherKeyError) as excinfo:
        aes_encode(key, bytes(16))
    assert excinfo.value.status == ExchangeStatus.CIPHER_KEY_ERROR
    with pytest.raises(CipherKeyError):
        aes_decode(key, bytes(16))
    with pytest.raises(CipherKeyError):
        aes_cmac(key, b"data")


@pytest.mark.parametrize("length", [0, 1, 15, 17, 31])
def test_data_must_be_whole_blocks(length):
    with pytest.raises(CipherOperationError) as excinfo:
        aes_encode(KEY, bytes(length))
    assert excinfo.value.status == ExchangeStatus.CIPHER_OPERATION_ERROR
    with pytest.raises(CipherOperationError):
        aes_decode(KEY, bytes(length))


def test_bad_iv_is_operation_error():
    with pytest.raises(CipherOperationError):
        aes_encode(KEY, bytes(16), bytes(8))


@pytest.mark.parametrize(
    "length, mac",
    [
        (0, "BB1D6929E95937287FA37D129B756746"),
        (16, "070A16B46B4D4144F79BDD9DD04A287C"),
        (40, "DFA66747DE9AE63030CA32611497C827"),
        (64, "51F0BEBF7E3B9D92FC49741779363CFE"),
    ],
)
def test_cmac_known_vectors(length, mac):
    # RFC 4493 section 4
    assert aes_cmac(KEY, PLAIN[:length]) == bytes.fromhex(mac)


def test_cmac_is_deterministic_and_sensitive():
    data = os.urandom(37)
    mac = aes_cmac(KEY, data)
    assert aes_cmac(KEY, data) == mac
    flipped = bytes([data[0] ^ 0x01]) + data[1:]
    assert aes_cmac(KEY, flipped) != mac
    other_key = bytes([KEY[0] ^ 0x80]) + KEY[1:]
    assert aes_cmac(other_key, data) != mac


def test_cmac8_takes_odd_indexed_bytes():
    mac = bytes(range(16))
    assert truncate_cmac(mac) == bytes([1, 3, 5, 7, 9, 11, 13, 15])


def test_cmac8_known_vector():
    assert aes_cmac8(KEY, PLAIN[:16]) == bytes.fromhex("0AB44D449B9D4A7C")


def test_truncate_rejects_short_mac():
    with pytest.raises(CipherOperationError):
        truncate_cmac(bytes(8))


def test_sha256():
    assert sha256(b"abc") == bytes.fromhex(
        "BA7816BF8F01CFEA414140DE5DAE2223B00361A396177A9CB410FF61F20015AD"
    )
