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
from vinventory.inventory.errors import HostConfigError
from vinventory.inventory.lookup import (LookupIndex, PortGroupIndex, claims_device, reference_endswith,
                                         format_vlan)
from vinventory.inventory.rows import new_row

log = get_logger()

host_network_properties = ["name", "config.network", "config.virtualNicManagerInfo.netConfig"]

# maps the vSphere traffic type (nicType) of a VMkernel adapter to its report column
traffic_role_columns = {
    "management": "ManagementTraffic",
    "vmotion": "vMotionTraffic",
    "vsan": "VSANTraffic",
    "vSphereProvisioning": "ProvisioningTraffic",
    "vSphereReplication": "ReplicationTraffic",
    "vSphereReplicationNFC": "ReplicationNFCTraffic",
    "faultToleranceLogging": "FaultToleranceTraffic"
}

host_network_columns = [
    "Endpoint",
    "Datacenter",
    "Cluster",
    "Host",
    "Type",
    "Device",
    "MAC",
    "Driver",
    "LinkSpeed",
    "Duplex",
    "VSSSwitch",
    "VSSMTU",
    "DVSSwitch",
    "DVSMTU",
    "VSSPortGroup",
    "VSSPortGroupVLAN",
    "PortGroupKey",
    "DVSPortGroup",
    "DVSPortGroupVLAN",
    "IPAddress",
    "SubnetMask",
    "DHCP",
    "IPv6Address",
    "MTU",
    *traffic_role_columns.values(),
    "GeneratedAt"
]


def _unquoted(value):
    value = get_string_or_none(value)
    if value is None:
        return None
    return unquote(value)


def _switch_columns(matches, name_attribute, host_name, device, switch_kind):
    """
    return name and MTU of the switches which claim a physical adapter.
    Name and MTU are always taken from the same switch entry. Multiple
    matches are joined in the same order.
    """

    if len(matches) == 0:
        return None, None

    names = [_unquoted(grab(x, name_attribute)) for x in matches]
    mtus = [grab(x, "mtu") for x in matches]

    if len(matches) == 1:
        return names[0], mtus[0]

    log.warning(f"Host '{host_name}': physical adapter '{device}' is claimed by {len(matches)} "
                f"{switch_kind} switches: {', '.join(map(str, names))}")

    return join_values(names), join_values(mtus)


def _physical_adapter_row(pnic, host_name, vswitches, proxy_switches):

    device = grab(pnic, "device")

    standard_matches = [x for x in vswitches
                        if any(claims_device(member, device) for member in grab(x, "pnic", fallback=list()))]
    distributed_matches = [x for x in proxy_switches
                           if any(claims_device(member, device) for member in grab(x, "pnic", fallback=list()))]

    if len(standard_matches) > 0 and len(distributed_matches) > 0:
        log.warning(f"Host '{host_name}': physical adapter '{device}' is claimed by a standard "
                    f"and a distributed switch")

    vss_name, vss_mtu = _switch_columns(standard_matches, "name", host_name, device, "standard")
    dvs_name, dvs_mtu = _switch_columns(distributed_matches, "dvsName", host_name, device, "distributed")

    duplex = grab(pnic, "linkSpeed.duplex")
    if duplex is not None:
        duplex = "full" if duplex is True else "half"

    log.debug2(f"Host '{host_name}': parsed physical adapter '{device}'")

    return new_row(host_network_columns, {
        "Host": host_name,
        "Type": "Physical",
        "Device": _unquoted(device),
        "MAC": normalize_mac_address(grab(pnic, "mac")),
        "Driver": grab(pnic, "driver"),
        "LinkSpeed": grab(pnic, "linkSpeed.speedMb"),
        "Duplex": duplex,
        "VSSSwitch": vss_name,
        "VSSMTU": vss_mtu,
        "DVSSwitch": dvs_name,
        "DVSMTU": dvs_mtu
    })


def _virtual_adapter_row(vnic, host, host_name, portgroup_index, host_portgroups, vswitches, proxy_switches,
                         selected_vnics_by_role):

    device = grab(vnic, "device")
    vnic_key = grab(vnic, "key")

    row = new_row(host_network_columns, {
        "Host": host_name,
        "Type": "Virtual",
        "Device": _unquoted(device),
        "MAC": normalize_mac_address(grab(vnic, "spec.mac")),
        "IPAddress": grab(vnic, "spec.ip.ipAddress"),
        "SubnetMask": grab(vnic, "spec.ip.subnetMask"),
        "DHCP": grab(vnic, "spec.ip.dhcp"),
        "MTU": grab(vnic, "spec.mtu")
    })

    ipv6_addresses = [f"{grab(x, 'ipAddress')}/{grab(x, 'prefixLength')}"
                      for x in grab(vnic, "spec.ip.ipV6Config.ipV6Address", fallback=list())]
    if len(ipv6_addresses) > 0:
        row["IPv6Address"] = join_values(ipv6_addresses)

    dv_port = grab(vnic, "spec.distributedVirtualPort")

    # distributed port group: resolved by port group key
    if dv_port is not None:

        portgroup_key = get_string_or_none(grab(dv_port, "portgroupKey"))
        row["PortGroupKey"] = portgroup_key

        portgroup = portgroup_index.lookup(host.endpoint, portgroup_key)
        if portgroup is not None:
            row["DVSPortGroup"] = _unquoted(portgroup.get("name"))
            row["DVSPortGroupVLAN"] = portgroup.get("vlan")
        else:
            log.debug2(f"Host '{host_name}': distributed port group '{portgroup_key}' of '{device}' not found")

        switch_uuid = grab(dv_port, "switchUuid")
        proxy_switch = next((x for x in proxy_switches
                             if switch_uuid is not None and grab(x, "dvsUuid") == switch_uuid), None)
        if proxy_switch is not None:
            row["DVSSwitch"] = _unquoted(grab(proxy_switch, "dvsName"))
            row["DVSMTU"] = grab(proxy_switch, "mtu")

    # standard port group: resolved by port group name
    else:
        portgroup_name = get_string_or_none(grab(vnic, "portgroup"))
        row["VSSPortGroup"] = _unquoted(portgroup_name)

        portgroup = host_portgroups.get(portgroup_name)
        if portgroup is not None:
            row["VSSPortGroupVLAN"] = format_vlan(grab(portgroup, "spec.vlanId"))

            vswitch_name = grab(portgroup, "spec.vswitchName")
            row["VSSSwitch"] = _unquoted(vswitch_name)

            vswitch = vswitches.get(vswitch_name)
            if vswitch is not None:
                row["VSSMTU"] = grab(vswitch, "mtu")
        elif portgroup_name is not None:
            log.debug2(f"Host '{host_name}': port group '{portgroup_name}' of '{device}' not found")

    # traffic roles, a role which doesn't select this adapter stays undefined
    for role, column in traffic_role_columns.items():
        if any(reference_endswith(selected, vnic_key) for selected in selected_vnics_by_role.get(role, list())):
            row[column] = True

    log.debug2(f"Host '{host_name}': parsed virtual adapter '{device}'")

    return row


def resolve_host_network_config(host, portgroup_index=None, all_portgroups=None):
    """
    Return one row per physical and one row per virtual adapter of a host.

    Switches, port groups, VLANs and traffic roles are resolved by cross-referencing
    the independent parts of the host network config:

        physical adapter -> (proxy) switch:   switch pnic list entry ends with "-<device>"
        virtual adapter -> dv port group:     port group key in the distributed port group index
        virtual adapter -> port group:        port group name in the host port group list
        virtual adapter -> traffic role:      selected vnic of a role ends with the adapter key

    The distributed port group index is either passed in (built once for the host's
    endpoint) or built from 'all_portgroups' (port groups of all endpoints) for this host only.
    Both produce the same result.

    Parameters
    ----------
    host: InventoryObject
        host returned by a query for 'host_network_properties'
    portgroup_index: PortGroupIndex
        distributed port groups of the host's endpoint
    all_portgroups: list
        distributed port groups of all endpoints, used if portgroup_index is None

    Returns
    -------
    list: of host network rows

    Raises
    ------
    HostConfigError: if the network config of the host is not available
    """

    host_name = get_string_or_none(host.name)

    if host.get("config.network") is None:
        raise HostConfigError(f"Network config of host '{host_name}' is not available")

    if portgroup_index is None:
        portgroup_index = PortGroupIndex(all_portgroups, endpoint=host.endpoint)

    vswitch_list = host.get_list("config.network.vswitch")
    proxy_switches = host.get_list("config.network.proxySwitch")

    vswitches = LookupIndex(f"host '{host_name}' standard switch")
    for vswitch in vswitch_list:
        vswitches.add(grab(vswitch, "name"), vswitch)

    host_portgroups = LookupIndex(f"host '{host_name}' port group")
    for portgroup in host.get_list("config.network.portgroup"):
        host_portgroups.add(grab(portgroup, "spec.name"), portgroup)

    selected_vnics_by_role = dict()
    for net_config in host.get_list("config.virtualNicManagerInfo.netConfig"):
        selected_vnics_by_role.setdefault(grab(net_config, "nicType"), list()).extend(
            grab(net_config, "selectedVnic", fallback=list()))

    rows = list()

    for pnic in host.get_list("config.network.pnic"):
        rows.append(_physical_adapter_row(pnic, host_name, vswitch_list, proxy_switches))

    for vnic in host.get_list("config.network.vnic"):
        rows.append(_virtual_adapter_row(vnic, host, host_name, portgroup_index, host_portgroups, vswitches,
                                         proxy_switches, selected_vnics_by_role))

    log.debug(f"Host '{host_name}': found {len(rows)} network adapters")

    return rows

# EOF
