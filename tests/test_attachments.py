import os

import pytest

from backend.crypto import b64_decode
from client.attachments import SaveOutcome, decode_attachment, encode_attachment, save_attachment
from protocol.errors import AttachmentError, SizeExceeded

from conftest import signed

PAYLOAD = bytes(range(256)) * 3


def _stored(identity, attachment, message_id=7):
    return signed(identity, "with file", attachment).with_id(message_id)


def test_round_trip_is_byte_identical(tmp_path, alice):
    src = tmp_path / "in.bin"
    src.write_bytes(PAYLOAD)
    encoded = encode_attachment(src)
    assert b64_decode(encoded) == PAYLOAD

    out_dir = tmp_path / "out"
    message = _stored(alice, encoded)
    assert decode_attachment(message) == PAYLOAD
    assert save_attachment(message, out_dir, confirm=lambda q: True) is SaveOutcome.SAVED
    assert (out_dir / "7.out").read_bytes() == PAYLOAD


def test_size_cap_checked_before_reading(tmp_path, monkeypatch):
    src = tmp_path / "big.bin"
    with open(src, "wb") as f:
        f.truncate(1025)

    def _no_read(self):
        raise AssertionError("file must not be read")

    monkeypatch.setattr(type(src), "read_bytes", _no_read)
    with pytest.raises(SizeExceeded) as exc:
        encode_attachment(src, max_bytes=1024)
    assert exc.value.size == 1025 and exc.value.limit == 1024


def test_exactly_at_cap_is_allowed(tmp_path):
    src = tmp_path / "edge.bin"
    src.write_bytes(b"x" * 1024)
    assert encode_attachment(src, max_bytes=1024)


def test_missing_or_directory_rejected(tmp_path):
    with pytest.raises(AttachmentError):
        encode_attachment(tmp_path / "missing.bin")
    with pytest.raises(AttachmentError):
        encode_attachment(tmp_path)


def test_existing_file_declined_is_untouched(tmp_path, alice):
    target = tmp_path / "7.out"
    target.write_bytes(b"keep me")
    questions = []

    outcome = save_attachment(
        _stored(alice, "AAEC"), tmp_path, confirm=lambda q: questions.append(q) or False
    )
    assert outcome is SaveOutcome.DECLINED
    assert target.read_bytes() == b"keep me"
    assert questions == ["File 7.out already exists. Do you want to overwrite it?"]


def test_existing_file_overwritten_after_yes(tmp_path, alice):
    (tmp_path / "7.out").write_bytes(b"old")
    assert save_attachment(_stored(alice, "AAEC"), tmp_path, confirm=lambda q: True) is SaveOutcome.SAVED
    assert (tmp_path / "7.out").read_bytes() == b"\x00\x01\x02"


def test_no_prompt_when_target_is_new(tmp_path, alice):
    def _never(q):
        raise AssertionError("should not ask")
    assert save_attachment(_stored(alice, "AAEC"), tmp_path, confirm=_never) is SaveOutcome.SAVED


def test_no_attachment(tmp_path, alice):
    assert save_attachment(_stored(alice, None), tmp_path, confirm=lambda q: True) is SaveOutcome.NO_ATTACHMENT
    assert save_attachment(_stored(alice, ""), tmp_path, confirm=lambda q: True) is SaveOutcome.NO_ATTACHMENT
    assert os.listdir(tmp_path) == []


def test_malformed_payload(alice):
    with pytest.raises(AttachmentError):
        decode_attachment(_stored(alice, "%%%not-base64"))
