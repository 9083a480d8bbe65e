"""
.. module:: broadcast
    :platform: Darwin, Linux, Unix, Windows
    :synopsis: Module that contains the broadcast session used to send wake-on-lan
               magic packets to a broadcast address.

.. moduleauthor:: Myron Walker <myron.walker@gmail.com>
"""

__author__ = "Myron Walker"
__copyright__ = "Copyright 2023, Myron W Walker"
__credits__ = []
__version__ = "1.0.0"
__maintainer__ = "Myron Walker"
__email__ = "myron.walker@gmail.com"
__status__ = "Development" # Prototype, Development or Production
__license__ = "MIT"

from typing import Optional, Union

import logging
import socket
import threading
import time

from mojo.errors.exceptions import SemanticError

from mojo.wakeonlan.constants import DEFAULT_RETRIES, DEFAULT_SEND_INTERVAL, WAKE_ON_LAN_PORT
from mojo.wakeonlan.exceptions import SendError, SocketSetupError


logger = logging.getLogger()


def create_broadcast_socket(timeout: Optional[float] = None, broadcast_address: Optional[str] = None) -> socket.socket:
    """
        Create an IPv4 UDP socket that is allowed to send to broadcast addresses.

        :param timeout: The socket timeout to assign to the socket
        :param broadcast_address: The broadcast address the socket is being created for, used
                                  when reporting errors.

        :returns: The UDP socket with the 'SO_BROADCAST' option set.

        :raises SocketSetupError: If the socket could not be created or configured.
    """

    sock = None

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

        # The broadcast option must be set before anything is sent, sendto a broadcast
        # address fails with EACCES without it.
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)

        if timeout is not None:
            sock.settimeout(timeout)

    except OSError as os_err:
        if sock is not None:
            sock.close()

        err_msg = "Failed to create UDP socket for broadcast_address={}: {}".format(broadcast_address, os_err)
        raise SocketSetupError(err_msg, broadcast_address=broadcast_address) from os_err

    return sock


class BroadcastSession:
    """
        Sends a magic packet to a single broadcast address a fixed number of times, spaced
        by a fixed interval.  Each session owns its own socket and sending thread, which are
        released together when the last packet has been sent or when the first error occurs.
    """

    def __init__(self, magic_packet: bytes, broadcast_address: str, retries: int = DEFAULT_RETRIES,
                 port: int = WAKE_ON_LAN_PORT, interval: float = DEFAULT_SEND_INTERVAL):
        """
            :param magic_packet: The magic packet to send.
            :param broadcast_address: The IPv4 broadcast address to send the magic packet to.
            :param retries: The number of times the magic packet is sent, must be 1 or greater.
            :param port: The UDP port the magic packet is sent to.
            :param interval: The number of seconds to wait before each send.
        """
        if retries < 1:
            errmsg = "The 'retries' parameter must be 1 or greater. retries={}".format(retries)
            raise SemanticError(errmsg)

        self._magic_packet = magic_packet
        self._broadcast_address = broadcast_address
        self._retries = retries
        self._port = port
        self._interval = interval

        self._lock = threading.Lock()
        self._complete_gate = threading.Event()

        self._thread = None
        self._started = False

        self._sent = 0
        self._error = None
        return

    @property
    def broadcast_address(self) -> str:
        return self._broadcast_address

    @property
    def completed(self) -> bool:
        return self._complete_gate.is_set()

    @property
    def error(self) -> Union[SendError, SocketSetupError, None]:
        rtnval = None

        self._lock.acquire()
        try:
            rtnval = self._error
        finally:
            self._lock.release()

        return rtnval

    @property
    def port(self) -> int:
        return self._port

    @property
    def retries(self) -> int:
        return self._retries

    @property
    def sent(self) -> int:
        rtnval = None

        self._lock.acquire()
        try:
            rtnval = self._sent
        finally:
            self._lock.release()

        return rtnval

    @property
    def succeeded(self) -> bool:
        return self.completed and self.error is None

    def start(self):
        """
            Starts the sending thread for the session.  Returns once the socket for the
            session has been set up, without waiting for any packets to be sent.
        """

        self._lock.acquire()
        try:
            if self._started:
                raise RuntimeError("The broadcast session for {} has already been started.".format(self._broadcast_address))
            self._started = True
        finally:
            self._lock.release()

        sgate = threading.Event()
        sgate.clear()

        self._thread = threading.Thread(target=self._send_thread_entry, name="mojo-wakeonlan-send", args=(sgate,), daemon=True)
        self._thread.start()

        sgate.wait()

        return

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
            Waits for the session to complete.

            :param timeout: The maximum number of seconds to wait or None to wait indefinitely.

            :returns: True if the session completed, False if the timeout expired first.
        """

        if not self._started:
            errmsg = "You must call 'start' before calling 'wait'"
            raise SemanticError(errmsg)

        completed = self._complete_gate.wait(timeout)

        return completed

    def raise_for_error(self):
        """
            Raises the error that ended the session, if there was one.
        """
        error = self.error
        if error is not None:
            raise error
        return

    def _record_error(self, error: Union[SendError, SocketSetupError]):

        self._lock.acquire()
        try:
            if self._error is None:
                self._error = error
        finally:
            self._lock.release()

        logger.error("Broadcast session failed. %s", error)

        return

    def _send_magic_packets(self, sock: socket.socket):

        for attempt in range(1, self._retries + 1):
            time.sleep(self._interval)

            # TypeError and ValueError come from addresses that can not be encoded as a host name
            try:
                sock.sendto(self._magic_packet, (self._broadcast_address, self._port))
            except (OSError, TypeError, ValueError) as send_err:
                raise SendError(self._broadcast_address, send_err) from send_err

            self._lock.acquire()
            try:
                self._sent += 1
            finally:
                self._lock.release()

            logger.debug("Sent magic packet %d of %d to %s:%d", attempt, self._retries, self._broadcast_address, self._port)

        return

    def _send_thread_entry(self, sgate: threading.Event):

        try:
            sock = create_broadcast_socket(broadcast_address=self._broadcast_address)
        except SocketSetupError as setup_err:
            self._record_error(setup_err)
            self._complete_gate.set()
            sgate.set()
            return

        sgate.set()

        try:
            try:
                self._send_magic_packets(sock)
            finally:
                sock.close()

            logger.info("Sent wake message to: %s", self._broadcast_address)

        except SendError as send_err:
            self._record_error(send_err)

        finally:
            self._complete_gate.set()

        return


def broadcast_wake_message(magic_packet: bytes, broadcast_address: str, retries: int = DEFAULT_RETRIES,
                           port: int = WAKE_ON_LAN_PORT, interval: float = DEFAULT_SEND_INTERVAL) -> BroadcastSession:
    """
        Creates and starts a :class:`BroadcastSession` that sends the magic packet to the
        broadcast address.

        :param magic_packet: The magic packet to send.
        :param broadcast_address: The IPv4 broadcast address to send the magic packet to.
        :param retries: The number of times the magic packet is sent.
        :param port: The UDP port the magic packet is sent to.
        :param interval: The number of seconds to wait before each send.

        :returns: The started session.
    """
    session = BroadcastSession(magic_packet, broadcast_address, retries=retries, port=port, interval=interval)
    session.start()
    return session
