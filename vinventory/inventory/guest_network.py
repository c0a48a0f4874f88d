# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

from urllib.parse import unquote

from vinventory.common.logging import get_logger
from vinventory.common.misc import grab, get_string_or_none
from vinventory.common.support import normalize_mac_address, join_values
from vinventory.inventory.rows import new_row

log = get_logger()

guest_network_properties = ["name", "config.hardware.device", "guest.net"]

distributed_backing_type = "VirtualEthernetCardDistributedVirtualPortBackingInfo"

guest_network_columns = [
    "Endpoint",
    "Datacenter",
    "Cluster",
    "VM",
    "Adapter",
    "AdapterType",
    "MacAddress",
    "MacAddressType",
    "PortGroup",
    "PortGroupType",
    "Switch",
    "Connected",
    "StartConnected",
    "AllowGuestControl",
    "IPAddress",
    "PrefixLength",
    "DHCP",
    "GeneratedAt"
]


def classify_backing(device):
    """
    return the kind of port group a network adapter is attached to

    Returns
    -------
    str: "Distributed", "NotAssigned" or "Standard"
    """

    if grab(device, "backing._wsdlName") == distributed_backing_type:
        return "Distributed"

    if grab(device, "deviceInfo.summary") == "None":
        return "NotAssigned"

    return "Standard"


def _live_ip_columns(live_entries):
    """
    combine IP addresses, prefix lengths and DHCP flags of all live guest NICs with the same MAC
    """

    ip_addresses = list()
    prefix_lengths = list()
    dhcp_flags = list()

    for live_entry in live_entries:

        for ip_entry in grab(live_entry, "ipConfig.ipAddress", fallback=list()):
            ip_addresses.append(grab(ip_entry, "ipAddress"))
            prefix_lengths.append(grab(ip_entry, "prefixLength"))

        # None if the guest reports no IP config
        dhcp_flags.append(grab(live_entry, "ipConfig.dhcp.ipv4.enable"))

    return {
        "IPAddress": join_values(ip_addresses),
        "PrefixLength": join_values(prefix_lengths),
        "DHCP": join_values(dhcp_flags)
    }


def resolve_guest_adapters(vm, portgroup_index, switch_index):
    """
    Return one row per network adapter of a VM.

    Every hardware device with a MAC address is a network adapter. It is
    correlated with the live guest network info ('guest.net', requires VMware tools)
    by MAC address. MAC addresses are only compared within this VM.

    Parameters
    ----------
    vm: InventoryObject
        VM returned by a query for 'guest_network_properties'
    portgroup_index: PortGroupIndex
        distributed port groups, at least of the VM's endpoint
    switch_index: SwitchIndex
        distributed virtual switches, at least of the VM's endpoint

    Returns
    -------
    list: of guest network rows
    """

    vm_name = get_string_or_none(vm.name)

    live_entries_by_mac = dict()
    for live_entry in vm.get_list("guest.net"):
        live_mac = normalize_mac_address(grab(live_entry, "macAddress"))
        if live_mac is not None:
            live_entries_by_mac.setdefault(live_mac, list()).append(live_entry)

    rows = list()

    for device in vm.get_list("config.hardware.device"):

        mac_address = normalize_mac_address(grab(device, "macAddress"))

        # not a network adapter or no MAC assigned yet
        if mac_address is None:
            continue

        portgroup_type = classify_backing(device)
        portgroup_name = None
        switch_name = None

        if portgroup_type == "Distributed":

            portgroup_key = grab(device, "backing.port.portgroupKey")
            portgroup = portgroup_index.lookup(vm.endpoint, portgroup_key)

            switch = None
            if portgroup is not None:
                portgroup_name = portgroup.get("name")
                switch = switch_index.lookup(ref=portgroup.get("switch"))
            else:
                log.debug2(f"VM '{vm_name}': distributed port group '{portgroup_key}' not found")

            if switch is None:
                switch = switch_index.lookup(endpoint=vm.endpoint, uuid=grab(device, "backing.port.switchUuid"))

            if switch is not None:
                switch_name = switch.get("name")

        elif portgroup_type == "Standard":
            portgroup_name = get_string_or_none(grab(device, "backing.deviceName"))

        row = new_row(guest_network_columns, {
            "VM": vm_name,
            "Adapter": grab(device, "deviceInfo.label"),
            "AdapterType": grab(device, "_wsdlName"),
            "MacAddress": mac_address,
            "MacAddressType": grab(device, "addressType"),
            "PortGroup": unquote(portgroup_name) if portgroup_name is not None else None,
            "PortGroupType": portgroup_type,
            "Switch": switch_name,
            "Connected": grab(device, "connectable.connected"),
            "StartConnected": grab(device, "connectable.startConnected"),
            "AllowGuestControl": grab(device, "connectable.allowGuestControl"),
        })

        row.update(_live_ip_columns(live_entries_by_mac.get(mac_address, list())))

        rows.append(row)

    log.debug2(f"VM '{vm_name}': found {len(rows)} network adapters")

    return rows

# EOF
