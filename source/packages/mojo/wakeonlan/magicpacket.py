"""
.. module:: magicpacket
    :platform: Darwin, Linux, Unix, Windows
    :synopsis: Contains the functions used to build wake-on-lan magic packets.

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

from mojo.wakeonlan.constants import MAC_ADDRESS_LENGTH, MAC_REPEAT_COUNT, MAGIC_PACKET_HEADER, REGEX_MAC_SEGMENT
from mojo.wakeonlan.exceptions import InvalidAddressError


def parse_mac_address(mac: str) -> bytes:
    """
        Parses a MAC address into its raw bytes.  Any separator can be used between
        the hex byte pairs, or none at all.

        :param mac: The MAC address to parse.

        :returns: The six bytes of the MAC address.

        :raises InvalidAddressError: If exactly six hex byte pairs could not be extracted.
    """
    segments = REGEX_MAC_SEGMENT.findall(mac)
    if len(segments) != MAC_ADDRESS_LENGTH:
        errmsg = "invalid MAC-address {}".format(mac)
        raise InvalidAddressError(errmsg)

    mac_bytes = bytes([ int(seg, 16) for seg in segments ])

    return mac_bytes


def format_mac_address(mac_bytes: bytes) -> str:
    """
        Formats raw MAC address bytes as lowercase colon separated text.
    """
    return ":".join([ "{:02x}".format(b) for b in mac_bytes ])


def create_magic_packet(mac: str) -> bytes:
    """
        Creates the magic packet for the specified MAC address.

        [FF FF FF FF FF FF] + [mac] * 16   ( len 102 bytes )

        :param mac: The MAC address from which the magic packet is formed.

        :returns: The magic packet bytes.

        :raises InvalidAddressError: If the MAC address is not valid.
    """
    mac_bytes = parse_mac_address(mac)

    magic_packet = MAGIC_PACKET_HEADER + (mac_bytes * MAC_REPEAT_COUNT)

    return magic_packet
