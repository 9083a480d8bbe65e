"""
.. module:: wakeonlan
    :platform: Darwin, Linux, Unix, Windows
    :synopsis: The wakeonlan package contains modules for building wake-on-lan magic packets
               and broadcasting them to wake hosts on the local networks.

.. moduleauthor:: Myron Walker <myron.walker@gmail.com>
"""

__author__ = "Myron Walker"
__copyright__ = "Copyright 2023, Myron W Walker"
__credits__ = []

from mojo.wakeonlan.broadcast import BroadcastSession, broadcast_wake_message
from mojo.wakeonlan.exceptions import InvalidAddressError, SendError, SocketSetupError, WakeOnLanError
from mojo.wakeonlan.interfaces import get_broadcast_addresses
from mojo.wakeonlan.magicpacket import create_magic_packet
from mojo.wakeonlan.wake import WakeRequest, send_wake
