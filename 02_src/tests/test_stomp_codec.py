"""Tests for STOMP frame encoding and decoding."""

import pytest

from livedata.models import StompCommand, StompFrame
from livedata.stomp import HEARTBEAT, StompProtocolError, decode_frames, encode_frame


class TestEncodeFrame:
    def test_encode_without_body(self):
        frame = StompFrame(
            command=StompCommand.SUBSCRIBE,
            headers={"id": "sub-0", "destination": "/topic/live-data"},
        )
        assert encode_frame(frame) == (
            "SUBSCRIBE\nid:sub-0\ndestination:/topic/live-data\n\n\0"
        )

    def test_encode_adds_content_length_in_octets(self):
        frame = StompFrame(command=StompCommand.SEND, headers={"destination": "/topic/a"}, body="héllo")
        text = encode_frame(frame)
        assert "content-length:6\n" in text
        assert text.endswith("\n\nhéllo\0")

    def test_encode_escapes_header_values(self):
        frame = StompFrame(command=StompCommand.ERROR, headers={"message": "bad: a\nb\\c"})
        assert "message:bad\\c a\\nb\\\\c\n" in encode_frame(frame)

    def test_connected_headers_not_escaped(self):
        frame = StompFrame(command=StompCommand.CONNECTED, headers={"server": "x:1"})
        assert "server:x:1\n" in encode_frame(frame)


class TestDecodeFrames:
    def test_decode_single_frame(self):
        frames = decode_frames("MESSAGE\ndestination:/topic/live-data\nsubscription:sub-0\n\n{\"value\":1}\0")
        assert len(frames) == 1
        frame = frames[0]
        assert frame.command is StompCommand.MESSAGE
        assert frame.headers == {"destination": "/topic/live-data", "subscription": "sub-0"}
        assert frame.body == '{"value":1}'

    def test_decode_crlf(self):
        frames = decode_frames("CONNECT\r\naccept-version:1.2\r\nhost:localhost\r\n\r\n\0")
        assert frames[0].command is StompCommand.CONNECT
        assert frames[0].headers == {"accept-version": "1.2", "host": "localhost"}

    def test_heartbeat_only(self):
        assert decode_frames(HEARTBEAT) == []
        assert decode_frames("\r\n\n") == []

    def test_multiple_frames_with_heartbeats(self):
        data = "\nSUBSCRIBE\nid:1\ndestination:/topic/a\n\n\0\n\nUNSUBSCRIBE\nid:1\n\n\0\n"
        frames = decode_frames(data)
        assert [f.command for f in frames] == [StompCommand.SUBSCRIBE, StompCommand.UNSUBSCRIBE]

    def test_content_length_allows_nul_in_body(self):
        frames = decode_frames("SEND\ndestination:/topic/a\ncontent-length:3\n\na\0b\0")
        assert frames[0].body == "a\0b"

    def test_content_length_counts_octets(self):
        frames = decode_frames("SEND\ndestination:/topic/a\ncontent-length:6\n\nhéllo\0".encode("utf-8"))
        assert frames[0].body == "héllo"

    def test_unescapes_headers(self):
        frames = decode_frames("SEND\ndestination:/topic/a\\cb\nx:1\\n2\\\\\n\n\0")
        assert frames[0].headers["destination"] == "/topic/a:b"
        assert frames[0].headers["x"] == "1\n2\\"

    def test_connect_headers_not_unescaped(self):
        frames = decode_frames("CONNECT\nlogin:a\\cb\n\n\0")
        assert frames[0].headers["login"] == "a\\cb"

    def test_repeated_header_first_wins(self):
        frames = decode_frames("SEND\ndestination:/topic/a\ndestination:/topic/b\n\n\0")
        assert frames[0].headers["destination"] == "/topic/a"

    def test_header_value_may_contain_colon_in_connect(self):
        frames = decode_frames("CONNECT\nhost:localhost:8080\n\n\0")
        assert frames[0].headers["host"] == "localhost:8080"

    def test_decode_encoded_frame(self):
        original = StompFrame(
            command=StompCommand.MESSAGE,
            headers={"destination": "/topic/live-data", "message-id": "a:b"},
            body='{"value": 93.5}',
        )
        decoded = decode_frames(encode_frame(original))[0]
        assert decoded.command is original.command
        assert decoded.body == original.body
        assert decoded.headers["message-id"] == "a:b"
        assert decoded.headers["content-length"] == str(len(original.body))


class TestDecodeErrors:
    @pytest.mark.parametrize(
        "data",
        [
            "FOO\n\n\0",
            "SEND\ndestination:/topic/a\n\nbody",
            "SEND\nno-colon\n\n\0",
            "SEND\nx:bad\\t\n\n\0",
            "SEND\nx:trailing\\\n\n\0",
            "SEND\ncontent-length:abc\n\n\0",
            "SEND\ncontent-length:10\n\nshort\0",
            "SEND\ndestination:/topic/a",
        ],
    )
    def test_malformed(self, data):
        with pytest.raises(StompProtocolError):
            decode_frames(data)
