"""Unit tests for the single-shot TCP message client."""

import json
import socket
from unittest.mock import MagicMock

import pytest
from hostprobe.core.errors import (
    ErrorKind,
    InvalidAddressError,
    ProbeConnectionError,
    ReadError,
    SerializationError,
    WriteError,
)
from hostprobe.net.client import TcpMessageClient, parse_endpoint, send_message, serialize_message
from hostprobe.net.dialer import SocketDialer
from hostprobe.net.models import Endpoint, ResponseFraming


class StubDialer(SocketDialer):
    """Dialer handing out a prepared socket and recording calls."""

    def __init__(self, sock: socket.socket | MagicMock) -> None:
        self.sock = sock
        self.calls: list[tuple[Endpoint, float | None]] = []

    def connect(self, endpoint: Endpoint, timeout: float | None = None) -> socket.socket:
        self.calls.append((endpoint, timeout))
        return self.sock  # type: ignore[return-value]


class TestParseEndpoint:
    """Tests for address and port validation."""

    @pytest.mark.parametrize(
        ("address", "host"),
        [
            ("127.0.0.1", "127.0.0.1"),
            ("::1", "::1"),
            ("[fe80::1]", "fe80::1"),
            ("localhost", "localhost"),
            ("build-01.example.org", "build-01.example.org"),
        ],
    )
    def test_valid(self, address: str, host: str) -> None:
        """IP literals and hostnames are accepted."""
        assert parse_endpoint(address, 8080) == Endpoint(host=host, port=8080)

    @pytest.mark.parametrize(
        "address",
        ["", "   ", "not an address", "-bad.example", "host_name", "999.1.1.1", "1.2.3"],
    )
    def test_invalid_host(self, address: str) -> None:
        """Malformed hosts raise InvalidAddressError."""
        with pytest.raises(InvalidAddressError) as exc_info:
            parse_endpoint(address, 80)

        assert exc_info.value.kind == ErrorKind.INVALID_ADDRESS
        assert str(exc_info.value).startswith("Invalid address or port")

    @pytest.mark.parametrize("port", [0, -1, 65536])
    def test_invalid_port(self, port: int) -> None:
        """Ports outside 1-65535 raise InvalidAddressError."""
        with pytest.raises(InvalidAddressError, match="out of range"):
            parse_endpoint("127.0.0.1", port)

    @pytest.mark.parametrize("port", ["80", 80.0, None, True])
    def test_non_integer_port(self, port: object) -> None:
        """Ports must be integers; booleans and numeric strings are rejected."""
        with pytest.raises(InvalidAddressError, match="not an integer"):
            parse_endpoint("127.0.0.1", port)  # type: ignore[arg-type]

    def test_non_string_address(self) -> None:
        """A non-string host is rejected."""
        with pytest.raises(InvalidAddressError, match="not a string"):
            parse_endpoint(2130706433, 80)  # type: ignore[arg-type]

    def test_endpoint_str_brackets_ipv6(self) -> None:
        """IPv6 endpoints render in bracket form."""
        assert str(Endpoint("::1", 9000)) == "[::1]:9000"
        assert str(Endpoint("localhost", 9000)) == "localhost:9000"


class TestSerializeMessage:
    """Tests for JSON encoding of messages."""

    def test_compact(self) -> None:
        """Output has no whitespace between tokens."""
        assert serialize_message({"cmd": "ping", "args": [1, 2]}) == b'{"cmd":"ping","args":[1,2]}'

    def test_non_ascii_written_as_utf8(self) -> None:
        """Non-ASCII characters are UTF-8 encoded, not escaped."""
        assert serialize_message({"name": "café"}) == '{"name":"café"}'.encode()

    @pytest.mark.parametrize("message", [float("nan"), {1, 2}, object(), {"x": float("inf")}])
    def test_unencodable(self, message: object) -> None:
        """Values with no JSON form raise SerializationError."""
        with pytest.raises(SerializationError, match="Failed to serialize"):
            serialize_message(message)


class TestSendMessage:
    """End-to-end tests against a local listener."""

    def test_echo_round_trip(self, echo_server) -> None:
        """The reply to an echo peer is the compact JSON of the message."""
        message = {"type": "status", "id": 7, "tags": ["a", "b"]}
        payload = json.dumps(message, separators=(",", ":"))
        server = echo_server(expect_bytes=len(payload))

        response = send_message("127.0.0.1", server.port, message)

        assert response == payload
        assert server.received == payload.encode()

    def test_scalar_message(self, echo_server) -> None:
        """Any JSON value can be sent, not only objects."""
        server = echo_server(expect_bytes=4)

        assert send_message("127.0.0.1", server.port, None) == "null"

    def test_single_read_is_bounded(self, echo_server) -> None:
        """A reply longer than the buffer is truncated to one read."""
        reply = b"x" * 4096
        server = echo_server(reply=reply, expect_bytes=2)

        response = send_message("127.0.0.1", server.port, {})

        assert 0 < len(response) <= 1024
        assert reply.decode().startswith(response)

    def test_custom_buffer_size(self, echo_server) -> None:
        """read_buffer_size bounds the single read."""
        server = echo_server(reply=b"abcdefgh", expect_bytes=2)

        response = send_message("127.0.0.1", server.port, {}, read_buffer_size=4)

        assert response in {"a", "ab", "abc", "abcd"}

    def test_until_close_reads_everything(self, echo_server) -> None:
        """UNTIL_CLOSE framing collects the full reply."""
        reply = b"y" * 5000
        server = echo_server(reply=reply, expect_bytes=2)

        response = send_message(
            "127.0.0.1", server.port, {}, framing=ResponseFraming.UNTIL_CLOSE
        )

        assert response == reply.decode()

    def test_until_close_is_capped(self, echo_server) -> None:
        """UNTIL_CLOSE framing stops at max_response_bytes."""
        server = echo_server(reply=b"z" * 5000, expect_bytes=2)

        response = send_message(
            "127.0.0.1",
            server.port,
            {},
            framing=ResponseFraming.UNTIL_CLOSE,
            max_response_bytes=100,
        )

        assert response == "z" * 100

    def test_empty_reply(self, echo_server) -> None:
        """A peer that closes without replying yields an empty string."""
        server = echo_server(reply=b"", expect_bytes=2)

        assert send_message("127.0.0.1", server.port, {}) == ""

    def test_connection_refused(self, closed_port: int) -> None:
        """Nothing listening raises ProbeConnectionError."""
        with pytest.raises(ProbeConnectionError) as exc_info:
            send_message("127.0.0.1", closed_port, {"a": 1})

        assert exc_info.value.kind == ErrorKind.CONNECTION_ERROR
        assert f"127.0.0.1:{closed_port}" in str(exc_info.value)

    def test_read_timeout(self, echo_server) -> None:
        """A peer that never replies raises ReadError once the timeout expires."""
        server = echo_server(expect_bytes=1_000_000)

        with pytest.raises(ReadError, match="Failed to read response"):
            send_message("127.0.0.1", server.port, {}, timeout=0.2)


class TestTcpMessageClient:
    """Tests using a stub dialer."""

    def test_lossy_utf8_decoding(self) -> None:
        """Invalid UTF-8 in the reply becomes U+FFFD."""
        client_end, peer_end = socket.socketpair()
        with peer_end:
            peer_end.sendall(b"ok\xff")
            client = TcpMessageClient(StubDialer(client_end))

            response = client.send("127.0.0.1", 9000, {"a": 1})

            assert response == "ok\ufffd"
            assert peer_end.recv(64) == b'{"a":1}'

    def test_timeout_passed_to_dialer(self) -> None:
        """The configured timeout reaches the dialer."""
        client_end, peer_end = socket.socketpair()
        with peer_end:
            peer_end.sendall(b"{}")
            dialer = StubDialer(client_end)

            TcpMessageClient(dialer, timeout=3.0).send("localhost", 9000, [])

        assert dialer.calls == [(Endpoint("localhost", 9000), 3.0)]

    def test_validation_happens_before_connect(self) -> None:
        """Address and serialization errors never open a connection."""
        dialer = StubDialer(MagicMock())
        client = TcpMessageClient(dialer)

        with pytest.raises(InvalidAddressError):
            client.send("bad host", 9000, {})
        with pytest.raises(SerializationError):
            client.send("127.0.0.1", 9000, {"value": float("nan")})

        assert dialer.calls == []

    def test_dialer_failure(self) -> None:
        """A dialer OSError becomes ProbeConnectionError."""
        dialer = MagicMock(spec=SocketDialer)
        dialer.connect.side_effect = TimeoutError("timed out")

        with pytest.raises(ProbeConnectionError, match="timed out"):
            TcpMessageClient(dialer).send("10.0.0.1", 9000, {})

    def test_write_failure(self) -> None:
        """A send failure raises WriteError and closes the socket."""
        sock = MagicMock()
        sock.sendall.side_effect = BrokenPipeError("Broken pipe")

        with pytest.raises(WriteError) as exc_info:
            TcpMessageClient(StubDialer(sock)).send("127.0.0.1", 9000, {})

        assert exc_info.value.kind == ErrorKind.WRITE_ERROR
        sock.__exit__.assert_called_once()
        sock.recv.assert_not_called()

    def test_read_failure(self) -> None:
        """A receive failure raises ReadError."""
        sock = MagicMock()
        sock.recv.side_effect = ConnectionResetError("Connection reset by peer")

        with pytest.raises(ReadError, match="Connection reset"):
            TcpMessageClient(StubDialer(sock)).send("127.0.0.1", 9000, {})

    def test_single_read_requests_buffer_size(self) -> None:
        """Exactly one recv of read_buffer_size bytes is made."""
        sock = MagicMock()
        sock.recv.return_value = b"done"

        response = TcpMessageClient(StubDialer(sock), read_buffer_size=16).send(
            "127.0.0.1", 9000, {}
        )

        assert response == "done"
        sock.recv.assert_called_once_with(16)

    def test_rejects_non_positive_buffer(self) -> None:
        """A zero read buffer is a programming error."""
        with pytest.raises(ValueError, match="read_buffer_size"):
            TcpMessageClient(read_buffer_size=0)
