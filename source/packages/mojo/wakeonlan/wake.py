"""
.. module:: wake
    :platform: Darwin, Linux, Unix, Windows
    :synopsis: Contains the entry points used to wake a host by broadcasting magic packets
               to one broadcast address or to all of the local broadcast addresses.

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

from typing import List, Optional

import logging
import threading
import time

from mojo.errors.exceptions import SemanticError

from mojo.wakeonlan.broadcast import BroadcastSession
from mojo.wakeonlan.constants import (
    DEFAULT_EXCLUDE_INTERFACES, DEFAULT_RETRIES, DEFAULT_SEND_INTERVAL, MAC_ADDRESS_LENGTH, MAGIC_PACKET_HEADER, WAKE_ON_LAN_PORT
)
from mojo.wakeonlan.exceptions import InvalidAddressError
from mojo.wakeonlan.interfaces import get_broadcast_addresses
from mojo.wakeonlan.magicpacket import create_magic_packet, format_mac_address


logger = logging.getLogger()


class WakeRequest:
    """
        A request to wake a single host.  The magic packet is built once when the request is
        created and is shared by the :class:`BroadcastSession` objects started for each of the
        broadcast addresses the request is dispatched to.
    """

    def __init__(self, mac: str, retries: int = DEFAULT_RETRIES, port: int = WAKE_ON_LAN_PORT,
                 interval: float = DEFAULT_SEND_INTERVAL, exclude_interfaces: List[str] = DEFAULT_EXCLUDE_INTERFACES):
        """
            :param mac: The MAC address of the host to wake.
            :param retries: The number of times the magic packet is sent to each broadcast address.
            :param port: The UDP port the magic packet is sent to.
            :param interval: The number of seconds to wait before each send.
            :param exclude_interfaces: The interfaces to skip when discovering broadcast addresses.

            :raises InvalidAddressError: If the MAC address is not valid.
        """

        try:
            self._magic_packet = create_magic_packet(mac)
        except InvalidAddressError as inv_err:
            errmsg = "Failed to broadcast wake: {}".format(inv_err)
            raise InvalidAddressError(errmsg) from inv_err

        if retries < 1:
            errmsg = "The 'retries' parameter must be 1 or greater. retries={}".format(retries)
            raise SemanticError(errmsg)

        self._mac = mac
        self._retries = retries
        self._port = port
        self._interval = interval
        self._exclude_interfaces = exclude_interfaces

        self._lock = threading.Lock()

        self._dispatched = False
        self._dispatch_gate = threading.Event()
        self._discovery_thread = None
        self._discovery_error = None
        self._sessions: List[BroadcastSession] = []
        return

    @property
    def discovery_error(self) -> Optional[Exception]:
        rtnval = None

        self._lock.acquire()
        try:
            rtnval = self._discovery_error
        finally:
            self._lock.release()

        return rtnval

    @property
    def mac(self) -> str:
        return self._mac

    @property
    def magic_packet(self) -> bytes:
        return self._magic_packet

    @property
    def sessions(self) -> List[BroadcastSession]:
        rtnlist = None

        self._lock.acquire()
        try:
            rtnlist = [s for s in self._sessions]
        finally:
            self._lock.release()

        return rtnlist

    def dispatch(self, broadcast_address: Optional[str] = None):
        """
            Starts sending the magic packet.  When a broadcast address is specified a single
            session is started for it, otherwise the local broadcast addresses are discovered on
            a background thread and a session is started for each of them.  Returns without
            waiting for any packets to be sent.

            :param broadcast_address: The broadcast address to send to, or None to send to all of
                                      the broadcast addresses of the connected networks.
        """

        self._lock.acquire()
        try:
            if self._dispatched:
                raise RuntimeError("The wake request for {} has already been dispatched.".format(self._mac))
            self._dispatched = True
        finally:
            self._lock.release()

        logger.info("Broadcasting wake message for %s", format_mac_address(self._mac_bytes()))

        # Waiters are held on the dispatch gate until the session or the discovery thread exists
        try:
            if broadcast_address:
                self._start_session(broadcast_address)
            else:
                self._discovery_thread = threading.Thread(target=self._discovery_thread_entry, name="mojo-wakeonlan-discovery", daemon=True)
                self._discovery_thread.start()
        finally:
            self._dispatch_gate.set()

        return

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
            Waits for the discovery of broadcast addresses, if any, and for all of the sessions
            of the request to complete.

            :param timeout: The maximum number of seconds to wait or None to wait indefinitely.

            :returns: True if everything completed, False if the timeout expired first.
        """

        if not self._dispatched:
            errmsg = "You must call 'dispatch' before calling 'wait'"
            raise SemanticError(errmsg)

        deadline = None
        if timeout is not None:
            deadline = time.monotonic() + timeout

        if not self._dispatch_gate.wait(self._remaining(deadline)):
            return False

        if self._discovery_thread is not None:
            self._discovery_thread.join(self._remaining(deadline))
            if self._discovery_thread.is_alive():
                return False

        for session in self.sessions:
            if not session.wait(self._remaining(deadline)):
                return False

        return True

    def _discovery_thread_entry(self):

        try:
            broadcast_list = get_broadcast_addresses(exclude_interfaces=self._exclude_interfaces)
        except Exception as disc_err: # pylint: disable=broad-except
            self._lock.acquire()
            try:
                self._discovery_error = disc_err
            finally:
                self._lock.release()

            logger.exception("Failed to discover the local broadcast addresses.")
            return

        if len(broadcast_list) == 0:
            logger.warning("No broadcast addresses were found, no wake message sent for %s.", self._mac)
        else:
            logger.info("Discovered broadcast addresses: %s", ", ".join(broadcast_list))

        for broadcast_address in broadcast_list:
            self._start_session(broadcast_address)

        return

    def _mac_bytes(self) -> bytes:
        mac_offset = len(MAGIC_PACKET_HEADER)
        return self._magic_packet[mac_offset:mac_offset + MAC_ADDRESS_LENGTH]

    def _remaining(self, deadline: Optional[float]) -> Optional[float]:
        remaining = None
        if deadline is not None:
            remaining = max(0.0, deadline - time.monotonic())
        return remaining

    def _start_session(self, broadcast_address: str):

        session = BroadcastSession(self._magic_packet, broadcast_address, retries=self._retries,
                                   port=self._port, interval=self._interval)

        session.start()

        self._lock.acquire()
        try:
            self._sessions.append(session)
        finally:
            self._lock.release()

        return


def send_wake(mac: str, retries: int = DEFAULT_RETRIES, broadcast_address: Optional[str] = None) -> None:
    """
        Broadcasts the Wake-On-Lan message to the specified MAC address.  The sends happen in the
        background, this function does not wait for them.

        :param mac: The MAC address for which the broadcast is meant.
        :param retries: The amount of times the broadcast should be sent. Defaults to 1
        :param broadcast_address: The broadcast address on which the request is sent. When empty it
                                  sends to all broadcast addresses on the connected networks.

        :raises InvalidAddressError: If the MAC address is not valid, before anything is sent.
    """
    request = WakeRequest(mac, retries=retries)
    request.dispatch(broadcast_address)
    return


def main(argv: Optional[List[str]] = None) -> int:
    """
        Command line entry point, sends the wake message and waits for it to go out.

        :returns: The process exit code.
    """
    import argparse

    parser = argparse.ArgumentParser(prog="mojo-wakeonlan", description="Wake a host by broadcasting a magic packet.")
    parser.add_argument("mac", help="The MAC address of the host to wake.")
    parser.add_argument("-r", "--retries", type=int, default=DEFAULT_RETRIES, help="The number of times to send the magic packet.")
    parser.add_argument("-b", "--broadcast", default=None, help="The broadcast address to send to, all local networks when omitted.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each packet sent.")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(asctime)s %(levelname)s: %(message)s")

    try:
        request = WakeRequest(args.mac, retries=args.retries)
    except (InvalidAddressError, SemanticError) as err:
        logger.error("%s", err)
        return 2

    request.dispatch(args.broadcast)
    request.wait()

    exit_code = 0
    if request.discovery_error is not None:
        exit_code = 1

    for session in request.sessions:
        if not session.succeeded:
            exit_code = 1

    return exit_code


if __name__ == "__main__":
    import sys
    sys.exit(main())
