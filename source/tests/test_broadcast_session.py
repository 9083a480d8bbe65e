import unittest

from unittest import mock

from mojo.errors.exceptions import SemanticError

from mojo.wakeonlan.broadcast import BroadcastSession, broadcast_wake_message, create_broadcast_socket
from mojo.wakeonlan.exceptions import SendError, SocketSetupError
from mojo.wakeonlan.magicpacket import create_magic_packet

from fakes import FakeSocketFactory

MAGIC_PACKET = create_magic_packet("FF:FF:FF:FF:FF:FF")
WAIT_TIMEOUT = 5.0


class BroadcastTestCase(unittest.TestCase):

    def setUp(self):
        self.factory = FakeSocketFactory()
        self.socket_module = mock.Mock()
        self.socket_module.socket.side_effect = self.factory
        self.time_module = mock.Mock()

        patchers = [
            mock.patch("mojo.wakeonlan.broadcast.socket", self.socket_module),
            mock.patch("mojo.wakeonlan.broadcast.time", self.time_module)
        ]
        for patcher in patchers:
            patcher.start()
            self.addCleanup(patcher.stop)
        return


class TestCreateBroadcastSocket(BroadcastTestCase):

    def test_broadcast_option_is_set(self):
        sock = create_broadcast_socket()
        assert sock.options == [(self.socket_module.SOL_SOCKET, self.socket_module.SO_BROADCAST, 1)]
        self.socket_module.socket.assert_called_once_with(self.socket_module.AF_INET, self.socket_module.SOCK_DGRAM)
        return

    def test_setsockopt_failure(self):
        self.factory.socket_kwargs["fail_setsockopt"] = True

        with self.assertRaises(SocketSetupError) as ctx:
            create_broadcast_socket(broadcast_address="192.168.1.255")

        assert ctx.exception.broadcast_address == "192.168.1.255"
        assert isinstance(ctx.exception.__cause__, OSError), "The OS error should be chained."
        assert self.factory.created[0].closed.is_set(), "The socket should be closed on setup failure."
        return

    def test_socket_creation_failure(self):
        self.socket_module.socket.side_effect = OSError(24, "Too many open files")

        with self.assertRaises(SocketSetupError):
            create_broadcast_socket(broadcast_address="10.0.0.255")
        return


class TestBroadcastSession(BroadcastTestCase):

    def test_sends_retries_then_closes(self):
        session = broadcast_wake_message(MAGIC_PACKET, "192.168.1.255", retries=3)

        assert session.wait(WAIT_TIMEOUT), "The session should have completed."
        assert session.succeeded and session.error is None
        assert session.sent == 3

        sock = self.factory.created[0]
        assert len(self.factory.created) == 1, "A session should open exactly one socket."
        assert sock.datagrams == [(MAGIC_PACKET, ("192.168.1.255", 9))] * 3
        assert sock.calls == ["setsockopt", "sendto", "sendto", "sendto", "close"]
        return

    def test_sends_are_spaced_by_interval(self):
        session = broadcast_wake_message(MAGIC_PACKET, "192.168.1.255", retries=3)
        session.wait(WAIT_TIMEOUT)

        assert self.time_module.sleep.call_args_list == [mock.call(0.35)] * 3
        return

    def test_custom_port_and_interval(self):
        session = broadcast_wake_message(MAGIC_PACKET, "10.1.1.255", retries=2, port=7, interval=0.1)
        session.wait(WAIT_TIMEOUT)

        sock = self.factory.created[0]
        assert [addr for _, addr in sock.datagrams] == [("10.1.1.255", 7)] * 2
        assert self.time_module.sleep.call_args_list == [mock.call(0.1)] * 2
        return

    def test_send_failure_stops_session(self):
        self.factory.socket_kwargs["fail_on_send"] = 2

        session = broadcast_wake_message(MAGIC_PACKET, "192.168.1.255", retries=5)

        assert session.wait(WAIT_TIMEOUT)
        assert not session.succeeded
        assert session.sent == 1

        error = session.error
        assert isinstance(error, SendError)
        assert error.broadcast_address == "192.168.1.255"
        assert "192.168.1.255" in str(error) and "Network is unreachable" in str(error)
        assert isinstance(error.cause, OSError)

        sock = self.factory.created[0]
        assert sock.calls == ["setsockopt", "sendto", "sendto", "close"], "No sends should follow a failure."

        with self.assertRaises(SendError):
            session.raise_for_error()
        return

    def test_unencodable_address_fails_session(self):
        self.factory.socket_kwargs["send_exception"] = TypeError("encoding of hostname failed")

        session = broadcast_wake_message(MAGIC_PACKET, "ü" * 70, retries=2)

        assert session.wait(WAIT_TIMEOUT)
        assert not session.succeeded, "A session that sent nothing must not report success."
        assert session.sent == 0

        error = session.error
        assert isinstance(error, SendError)
        assert isinstance(error.cause, TypeError)
        assert self.factory.created[0].calls == ["setsockopt", "sendto", "close"]
        return

    def test_null_in_address_fails_session(self):
        self.factory.socket_kwargs["send_exception"] = ValueError("host name must not contain null character")

        session = broadcast_wake_message(MAGIC_PACKET, "192.168.1.255\x00")

        assert session.wait(WAIT_TIMEOUT)
        assert isinstance(session.error, SendError)
        assert not session.succeeded
        return

    def test_socket_setup_failure_sends_nothing(self):
        self.factory.socket_kwargs["fail_setsockopt"] = True

        session = broadcast_wake_message(MAGIC_PACKET, "192.168.1.255", retries=2)

        assert session.completed, "A setup failure should complete the session before start returns."
        assert isinstance(session.error, SocketSetupError)
        assert session.sent == 0
        assert "sendto" not in self.factory.created[0].calls
        return

    def test_raise_for_error_on_success(self):
        session = broadcast_wake_message(MAGIC_PACKET, "192.168.1.255")
        session.wait(WAIT_TIMEOUT)

        session.raise_for_error()
        assert session.sent == 1
        return


class TestBroadcastSessionMisuse(unittest.TestCase):

    def test_zero_retries_rejected(self):
        with self.assertRaises(SemanticError):
            BroadcastSession(MAGIC_PACKET, "192.168.1.255", retries=0)
        return

    def test_negative_retries_rejected(self):
        with self.assertRaises(SemanticError):
            BroadcastSession(MAGIC_PACKET, "192.168.1.255", retries=-1)
        return

    def test_wait_before_start(self):
        session = BroadcastSession(MAGIC_PACKET, "192.168.1.255")
        with self.assertRaises(SemanticError):
            session.wait(0)
        return


class TestBroadcastSessionRestart(BroadcastTestCase):

    def test_start_twice(self):
        session = broadcast_wake_message(MAGIC_PACKET, "192.168.1.255")
        session.wait(WAIT_TIMEOUT)

        with self.assertRaises(RuntimeError):
            session.start()
        return


if __name__ == '__main__':
    unittest.main()
