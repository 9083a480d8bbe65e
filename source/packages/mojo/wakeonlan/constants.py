"""
.. module:: constants
    :platform: Darwin, Linux, Unix, Windows
    :synopsis: Contains the constants used by the wake-on-lan modules.

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

import re

# The discard port, the port wake-on-lan listeners conventionally watch
WAKE_ON_LAN_PORT = 9

DEFAULT_RETRIES = 1
DEFAULT_SEND_INTERVAL = 0.35

DEFAULT_EXCLUDE_INTERFACES = ["lo"]

MAC_ADDRESS_LENGTH = 6
MAC_REPEAT_COUNT = 16

MAGIC_PACKET_HEADER = b"\xff" * 6
MAGIC_PACKET_LENGTH = len(MAGIC_PACKET_HEADER) + (MAC_ADDRESS_LENGTH * MAC_REPEAT_COUNT)

REGEX_MAC_SEGMENT = re.compile(r"[0-9a-fA-F]{2}")
REGEX_IPV4_COMPONENTS = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)\.([0-9]+)$")
