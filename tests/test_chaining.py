import pytest

from conftest import FakeCard

from fidoexp.core.base import ChainState, ISO7816, ResponseChain
from fidoexp.core.errors import BufferOverflowError, StatusError, TransportError
from fidoexp.core.smartcard import APDU, PROTOCOL, TRACE, ResponseBuffer

GET_RESPONSE = bytes.fromhex("00C0000000")
SELECT = ISO7816.select_apdu(bytes.fromhex("A0000006472F0001"))


def _iso(script):
    card = FakeCard(script)
    card.connected = True
    return card, ISO7816(card.transmit)


def test_no_chaining_on_9000():
    card, iso = _iso([(b"U2F_V2", 0x9000)])
    buf = ResponseBuffer(260)
    chain = ResponseChain(iso)
    assert chain.run("SELECT", SELECT, buf) == 0x9000
    assert chain.state is ChainState.DONE
    assert chain.continuations == 0
    assert buf.data == b"U2F_V2"
    assert len(card.sent) == 1


def test_parts_are_concatenated_in_order():
    parts = [b"A" * 10, b"B" * 8, b"C" * 4, b"D" * 2]
    card, iso = _iso([
        (parts[0], 0x6108),
        (parts[1], 0x6104),
        (parts[2], 0x6102),
        (parts[3], 0x9000),
    ])
    buf = ResponseBuffer(64)
    chain = ResponseChain(iso)
    assert chain.run("CMD", SELECT, buf) == 0x9000
    assert buf.data == b"".join(parts)
    assert chain.continuations == 3
    assert [a.to_bytes() for a in card.sent[1:]] == [GET_RESPONSE] * 3


def test_6100_triggers_one_continuation():
    card, iso = _iso([(b"x", 0x6100), (b"y", 0x9000)])
    buf = ResponseBuffer(16)
    chain = ResponseChain(iso)
    assert chain.run("CMD", SELECT, buf) == 0x9000
    assert chain.continuations == 1
    assert card.sent[1].to_bytes() == GET_RESPONSE
    assert buf.data == b"xy"


def test_overflow_stops_exchanges():
    card, iso = _iso([
        (b"\x11" * 10, 0x6100),
        (b"\x22" * 10, 0x6100),
        (b"\x33" * 1, 0x9000),
    ])
    buf = ResponseBuffer(16)
    chain = ResponseChain(iso)
    with pytest.raises(BufferOverflowError):
        chain.run("CMD", SELECT, buf)
    assert chain.state is ChainState.FAILED
    assert len(card.sent) == 2
    assert len(card.script) == 1
    assert buf.length == 0


def test_endless_61xx_is_bounded_by_capacity():
    card, iso = _iso([(b"\x00" * 100, 0x61FF)] * 50)
    buf = ResponseBuffer(1000)
    with pytest.raises(BufferOverflowError):
        ResponseChain(iso).run("CMD", SELECT, buf)
    # ten 100-byte parts fit exactly, the eleventh is refused
    assert len(card.sent) == 11


def test_initial_overflow():
    card, iso = _iso([(b"\x00" * 20, 0x9000)])
    buf = ResponseBuffer(10)
    with pytest.raises(BufferOverflowError):
        ResponseChain(iso).run("CMD", SELECT, buf)
    assert len(card.sent) == 1


def test_status_error_does_not_abort_chain():
    card, iso = _iso([(b"ab", 0x6102), (b"cd", 0x6A80)])
    buf = ResponseBuffer(16)
    chain = ResponseChain(iso)
    assert chain.run("CMD", SELECT, buf) == 0x6A80
    assert chain.state is ChainState.DONE
    assert buf.data == b"abcd"


def test_terminal_status_is_returned_without_chaining():
    card, iso = _iso([(b"", 0x6985)])
    buf = ResponseBuffer(16)
    chain = ResponseChain(iso)
    assert chain.run("CMD", SELECT, buf) == 0x6985
    assert chain.continuations == 0
    assert len(card.sent) == 1


def test_single_exchange_raises_status_error_when_checked():
    card, iso = _iso([(b"\x01\x02", 0x6A82), (b"\x03", 0x6A82)])
    buf = ResponseBuffer(16)
    with pytest.raises(StatusError) as excinfo:
        iso.exchange("READ", APDU(0x00, 0xB0, 0x00, 0x00, le=0), buf)
    assert excinfo.value.sw == 0x6A82
    assert buf.data == b"\x01\x02"
    resp = iso.exchange("READ", APDU(0x00, 0xB0, 0x00, 0x00, le=0), buf, check_sw=False)
    assert resp.sw == 0x6A82


def test_transport_failure_propagates_and_resets():
    card, iso = _iso([(b"part", 0x6110), TransportError("link lost")])
    buf = ResponseBuffer(64)
    chain = ResponseChain(iso)
    with pytest.raises(TransportError):
        chain.run("CMD", SELECT, buf)
    assert chain.state is ChainState.FAILED
    assert buf.length == 0


def test_chain_runs_once():
    card, iso = _iso([(b"", 0x9000)])
    chain = ResponseChain(iso)
    chain.run("CMD", SELECT, ResponseBuffer(4))
    with pytest.raises(RuntimeError):
        chain.run("CMD", SELECT, ResponseBuffer(4))


def test_continuations_are_logged_as_get_response(caplog):
    card, iso = _iso([(b"ab", 0x6102), (b"cd", 0x9000)])
    with caplog.at_level(TRACE, logger="fidoexp"):
        ResponseChain(iso).run("SELECT", SELECT, ResponseBuffer(16))
    lines = [r.getMessage() for r in caplog.records if r.levelno == PROTOCOL]
    assert lines[0].startswith("SELECT ")
    assert lines[1].startswith("GET RESPONSE ")
    assert card.sent[1].to_bytes() == GET_RESPONSE


def test_logging_off_for_one_chain(caplog):
    card, iso = _iso([(b"ab", 0x6102), (b"cd", 0x9000), (b"", 0x9000)])
    with caplog.at_level(TRACE, logger="fidoexp"):
        ResponseChain(iso, log=False).run("SELECT", SELECT, ResponseBuffer(16))
        assert not caplog.records
        iso.exchange("READ", APDU(0x00, 0xB0, 0x00, 0x00, le=0), ResponseBuffer(4))
    assert [r.levelno for r in caplog.records] == [TRACE, PROTOCOL]
