# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.


def normalize_mac_address(mac_address=None):
    """
    normalize a MAC address
        * format letters to upper case
        * replace dashes with colons
        * add colons if missing

    Parameters
    ----------
    mac_address: str
        MAC address to normalize

    Returns
    -------
    str: result of normalization, None if mac_address is empty
    """

    if mac_address is None:
        return None

    mac_address = str(mac_address).strip().upper().replace("-", ":")

    if len(mac_address) == 0:
        return None

    # add colons to interface address
    if ":" not in mac_address:
        mac_address = ':'.join(mac_address[i:i+2] for i in range(0, len(mac_address), 2))

    return mac_address


def join_values(values, separator="|"):
    """
    join a list of values to a single string, None values are rendered as empty string

    Parameters
    ----------
    values: list
        values to join
    separator: str
        string to put between the values

    Returns
    -------
    str: joined values
    """

    if values is None:
        return ""

    return separator.join("" if x is None else str(x) for x in values)

# EOF
