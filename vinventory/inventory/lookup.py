# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import threading

from vinventory.common.logging import get_logger
from vinventory.common.misc import grab, get_string_or_none
from vinventory.inventory.objects import ObjectReference

log = get_logger()

# properties needed to build the indexes
portgroup_index_properties = ["key", "name", "config.defaultPortConfig.vlan", "config.distributedVirtualSwitch"]
switch_index_properties = ["name", "uuid"]


def claims_device(member, device):
    """
    Switches list their physical adapters as "<prefix>-<device>",
    i.e. "key-vim.host.PhysicalNic-vmnic0". A member claims a device
    if it ends with a dash followed by the device name.

    Parameters
    ----------
    member: str
        entry of the pnic list of a (proxy) switch
    device: str
        device name of a physical adapter like "vmnic0"

    Returns
    -------
    bool: True if member points to the device
    """

    if member is None or device is None or len(str(device)) == 0:
        return False

    return str(member).endswith(f"-{device}")


def reference_endswith(reference, key):
    """
    check if a reference string (i.e. a selected vnic of a traffic role) ends with a key
    """

    if reference is None or key is None or len(str(key)) == 0:
        return False

    return str(reference).endswith(str(key))


def format_vlan(vlan_spec):
    """
    Render the VLAN configuration of a port group as string

        VlanIdSpec:   "100"
        TrunkVlanSpec: "0-4094" or "10, 20-30"
        PvlanSpec:     "200"

    Parameters
    ----------
    vlan_spec: int, vim.dvs.VmwareDistributedVirtualSwitch.VlanSpec
        VLAN id of a standard port group or VLAN spec of a distributed port group

    Returns
    -------
    str, None: None if no VLAN information is present
    """

    if vlan_spec is None:
        return None

    if isinstance(vlan_spec, int):
        return str(vlan_spec)

    spec_type = grab(vlan_spec, "_wsdlName", fallback="")

    if spec_type.endswith("TrunkVlanSpec"):
        vlan_ranges = list()
        for vlan_range in grab(vlan_spec, "vlanId", fallback=list()):
            start = grab(vlan_range, "start")
            end = grab(vlan_range, "end")
            if start == end:
                vlan_ranges.append(f"{start}")
            else:
                vlan_ranges.append(f"{start}-{end}")

        return ", ".join(vlan_ranges) if len(vlan_ranges) > 0 else None

    if spec_type.endswith("PvlanSpec"):
        pvlan_id = grab(vlan_spec, "pvlanId")
        return None if pvlan_id is None else str(pvlan_id)

    vlan_id = grab(vlan_spec, "vlanId")
    if isinstance(vlan_id, int):
        return str(vlan_id)

    return None


class LookupIndex:
    """
    Maps keys to items. Keys are expected to be unique, a lookup of a key with
    more than one item is an ambiguous correlation: it gets logged and counted
    but doesn't raise an error.
    """

    def __init__(self, name):
        self.name = name
        self._items = dict()
        self._lock = threading.Lock()
        self.ambiguous_lookups = 0

    def add(self, key, item):

        if key is None:
            return

        self._items.setdefault(key, list()).append(item)

    def get_all(self, key):
        return list(self._items.get(key, list()))

    def get(self, key):
        """
        return the item for key, None if key is unknown. If key is ambiguous the
        first item added is returned.
        """

        items = self._items.get(key)

        if items is None:
            return None

        if len(items) > 1:
            with self._lock:
                self.ambiguous_lookups += 1
            log.warning(f"Ambiguous lookup in {self.name} index: key '{key}' matches {len(items)} entries. "
                        f"Using first one.")

        return items[0]

    def __contains__(self, key):
        return key in self._items

    def __len__(self):
        return len(self._items)


class PortGroupIndex(LookupIndex):
    """
    Index of distributed port groups by (endpoint, port group key).

    If 'endpoint' is defined, only port groups of this endpoint are added.
    """

    def __init__(self, portgroups=None, endpoint=None):

        super().__init__("distributed port group")

        self.endpoint = endpoint

        for portgroup in portgroups or list():

            if endpoint is not None and portgroup.endpoint != endpoint:
                continue

            key = get_string_or_none(portgroup.get("key"))
            if key is None:
                continue

            self.add((portgroup.endpoint, key), {
                "key": key,
                "name": get_string_or_none(portgroup.get("name")),
                "vlan": format_vlan(portgroup.get("config.defaultPortConfig.vlan")),
                "switch": ObjectReference.from_value(portgroup.get("config.distributedVirtualSwitch"),
                                                     portgroup.endpoint),
                "endpoint": portgroup.endpoint
            })

    def lookup(self, endpoint, key):
        if key is None:
            return None
        return self.get((endpoint, str(key)))


class SwitchIndex(LookupIndex):
    """
    Index of distributed virtual switches by reference and by (endpoint, uuid)
    """

    def __init__(self, switches=None, endpoint=None):

        super().__init__("distributed virtual switch")

        self.endpoint = endpoint

        for switch in switches or list():

            if endpoint is not None and switch.endpoint != endpoint:
                continue

            switch_data = {
                "name": get_string_or_none(switch.get("name")),
                "uuid": get_string_or_none(switch.get("uuid")),
                "endpoint": switch.endpoint
            }

            self.add(switch.ref, switch_data)
            if switch_data.get("uuid") is not None:
                self.add((switch.endpoint, switch_data.get("uuid")), switch_data)

    def lookup(self, ref=None, endpoint=None, uuid=None):

        if ref is not None and ref in self:
            return self.get(ref)

        if uuid is not None:
            return self.get((endpoint, uuid))

        return None

# EOF
