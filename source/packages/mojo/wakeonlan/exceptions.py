"""
.. module:: exceptions
    :platform: Darwin, Linux, Unix, Windows
    :synopsis: Contains exceptions that can be raised while building or broadcasting
               wake-on-lan magic packets.

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

from typing import Optional


class WakeOnLanError(RuntimeError):
    """
        This error is the base error for failures to wake a host.
    """

class InvalidAddressError(WakeOnLanError, ValueError):
    """
        This error is raised when a MAC address can not be decomposed into six hex byte pairs.
    """

class SocketSetupError(WakeOnLanError):
    """
        This error is raised when a UDP socket can not be created or configured for broadcast.
    """
    def __init__(self, message, broadcast_address: Optional[str]=None, *args, **kwargs):
        super().__init__(message, *args, **kwargs)
        self.broadcast_address = broadcast_address
        return

class SendError(WakeOnLanError):
    """
        This error is raised when the transmission of a magic packet datagram fails.
    """
    def __init__(self, broadcast_address: str, cause: BaseException, *args, **kwargs):
        message = "Failed to broadcast wake to {}: {}".format(broadcast_address, cause)
        super().__init__(message, *args, **kwargs)
        self.broadcast_address = broadcast_address
        self.cause = cause
        return
