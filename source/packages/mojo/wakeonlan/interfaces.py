"""
.. module:: interfaces
    :platform: Darwin, Linux, Unix, Windows
    :synopsis: Contains helper functions for discovering the broadcast addresses of
               the local network interfaces.

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

from typing import Dict, List, Optional

import netifaces

from mojo.wakeonlan.constants import DEFAULT_EXCLUDE_INTERFACES, REGEX_IPV4_COMPONENTS


def is_broadcast_address(candidate: str) -> bool:
    """
        Checks that 'candidate' is a dotted-quad IPv4 address a magic packet can be sent to.
    """
    mobj = REGEX_IPV4_COMPONENTS.match(candidate)
    if mobj is None:
        return False

    octets = [ int(nc) for nc in mobj.groups() ]
    if max(octets) > 255:
        return False

    # The unspecified address is never a destination
    return octets != [0, 0, 0, 0]


def get_ipv4_interface_info(exclude_interfaces: List[str]=DEFAULT_EXCLUDE_INTERFACES,
                            include_interfaces: Optional[List[str]]=None) -> List[Dict[str, str]]:
    """
        Gets the IPv4 address information for the local interfaces which have a broadcast address.

        :param exclude_interfaces: The names of the interfaces to skip.
        :param include_interfaces: When specified, only these interfaces are examined.

        :returns: A list of dictionaries with 'ifname', 'addr', 'netmask' and 'broadcast' keys,
                  one for each IPv4 address that has a broadcast address.
    """

    iface_info_list = []

    interface_list = None
    if include_interfaces is not None:
        interface_list = include_interfaces
    else:
        interface_list = netifaces.interfaces()

    for ifname in interface_list:
        if ifname in exclude_interfaces:
            continue

        address_info = netifaces.ifaddresses(ifname)
        if address_info is None or netifaces.AF_INET not in address_info:
            continue

        # An interface can have more than one address in the same family
        for addr_info in address_info[netifaces.AF_INET]:
            if "broadcast" not in addr_info:
                continue

            iinfo = {
                "ifname": ifname,
                "addr": addr_info.get("addr"),
                "netmask": addr_info.get("netmask"),
                "broadcast": addr_info["broadcast"]
            }
            iface_info_list.append(iinfo)

    return iface_info_list


def get_broadcast_addresses(exclude_interfaces: List[str]=DEFAULT_EXCLUDE_INTERFACES,
                            include_interfaces: Optional[List[str]]=None) -> List[str]:
    """
        Gets the distinct IPv4 broadcast addresses of the local network interfaces.

        :param exclude_interfaces: The names of the interfaces to skip.
        :param include_interfaces: When specified, only these interfaces are examined.

        :returns: The list of broadcast addresses in interface order.
    """
    broadcast_list = []

    for iinfo in get_ipv4_interface_info(exclude_interfaces=exclude_interfaces, include_interfaces=include_interfaces):
        broadcast_addr = iinfo["broadcast"]
        if is_broadcast_address(broadcast_addr) and broadcast_addr not in broadcast_list:
            broadcast_list.append(broadcast_addr)

    return broadcast_list
