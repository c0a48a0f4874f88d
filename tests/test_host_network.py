# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

from types import SimpleNamespace

import pytest

from vinventory.inventory.errors import HostConfigError, FatalLeafError
from vinventory.inventory.host_network import resolve_host_network_config, host_network_columns
from vinventory.inventory.lookup import PortGroupIndex
from vinventory.inventory.objects import InventoryObject, ObjectReference

DVS_UUID = "50 0a 1b 2c 3d 4e 5f 60-71 82 93 a4 b5 c6 d7 e8"


def pnic(device, mac, speed=None, duplex=None, driver="ixgben"):
    link_speed = None
    if speed is not None:
        link_speed = SimpleNamespace(speedMb=speed, duplex=duplex)
    return SimpleNamespace(device=device, mac=mac, driver=driver, linkSpeed=link_speed)


def vnic(device, mac, ip_address, portgroup="", dv_port=None, mtu=1500, ipv6=None):
    ipv6_config = None
    if ipv6 is not None:
        ipv6_config = SimpleNamespace(ipV6Address=[SimpleNamespace(ipAddress=x, prefixLength=64) for x in ipv6])
    return SimpleNamespace(
        device=device,
        key=f"key-vim.host.VirtualNic-{device}",
        portgroup=portgroup,
        spec=SimpleNamespace(
            mac=mac,
            mtu=mtu,
            distributedVirtualPort=dv_port,
            ip=SimpleNamespace(ipAddress=ip_address, subnetMask="255.255.255.0", dhcp=False,
                               ipV6Config=ipv6_config)
        )
    )


def dv_port(portgroup_key, switch_uuid=DVS_UUID):
    return SimpleNamespace(portgroupKey=portgroup_key, switchUuid=switch_uuid, portKey="12")


def vswitch(name, mtu, pnics):
    return SimpleNamespace(name=name, mtu=mtu, pnic=[f"key-vim.host.PhysicalNic-{x}" for x in pnics])


def proxy_switch(name, mtu, pnics, uuid=DVS_UUID):
    return SimpleNamespace(dvsName=name, dvsUuid=uuid, mtu=mtu,
                           pnic=[f"key-vim.dvs.HostMember.pnicSpec-{x}" for x in pnics])


def host_portgroup(name, vlan, vswitch_name):
    return SimpleNamespace(spec=SimpleNamespace(name=name, vlanId=vlan, vswitchName=vswitch_name))


def net_config(nic_type, *devices):
    return SimpleNamespace(nicType=nic_type,
                           selectedVnic=[f"{nic_type}.key-vim.host.VirtualNic-{x}" for x in devices])


def make_host(network, roles=None, endpoint="vc01", name="esx01.example.com"):
    return InventoryObject(ObjectReference("HostSystem", "host-1", endpoint), endpoint, {
        "name": name,
        "config.network": network,
        "config.virtualNicManagerInfo.netConfig": roles or list()
    })


def network(pnics=None, vnics=None, vswitches=None, proxy_switches=None, portgroups=None):
    return SimpleNamespace(pnic=pnics or list(), vnic=vnics or list(), vswitch=vswitches or list(),
                           proxySwitch=proxy_switches or list(), portgroup=portgroups or list())


def distributed_portgroup(endpoint, key, name, vlan_id):
    return InventoryObject(ObjectReference("DistributedVirtualPortgroup", key, endpoint), endpoint, {
        "key": key,
        "name": name,
        "config.defaultPortConfig.vlan": SimpleNamespace(_wsdlName="VmwareDistributedVirtualSwitchVlanIdSpec",
                                                         vlanId=vlan_id),
        "config.distributedVirtualSwitch": SimpleNamespace(_wsdlName="VmwareDistributedVirtualSwitch",
                                                           _moId="dvs-1")
    })


@pytest.fixture
def portgroups():
    return [
        distributed_portgroup("vc01", "dvportgroup-55", "DPG-Management", 100),
        distributed_portgroup("vc02", "dvportgroup-55", "DPG-Other-Endpoint", 999),
    ]


@pytest.fixture
def scenario_host():
    return make_host(
        network(
            pnics=[pnic("vmnic0", "00:50:56:aa:bb:01", 10000, True), pnic("vmnic1", "00:50:56:aa:bb:02")],
            vnics=[vnic("vmk0", "00:50:56:cc:dd:01", "10.0.0.11", dv_port=dv_port("dvportgroup-55"), mtu=9000)],
            vswitches=[vswitch("vSwitch0", 1500, ["vmnic0"])],
            proxy_switches=[proxy_switch("dvs01", 9000, [])],
        ),
        roles=[net_config("management", "vmk0"), net_config("vmotion")]
    )


def test_three_row_scenario(scenario_host, portgroups):
    rows = resolve_host_network_config(scenario_host, portgroup_index=PortGroupIndex(portgroups, endpoint="vc01"))

    assert len(rows) == 3
    assert [list(x.keys()) for x in rows] == [host_network_columns] * 3

    vmnic0, vmnic1, vmk0 = rows

    assert vmnic0["Type"] == "Physical"
    assert vmnic0["Device"] == "vmnic0"
    assert vmnic0["MAC"] == "00:50:56:AA:BB:01"
    assert vmnic0["LinkSpeed"] == 10000
    assert vmnic0["Duplex"] == "full"
    assert vmnic0["VSSSwitch"] == "vSwitch0"
    assert vmnic0["VSSMTU"] == 1500
    assert vmnic0["DVSSwitch"] is None

    assert vmnic1["Type"] == "Physical"
    assert vmnic1["Device"] == "vmnic1"
    assert vmnic1["VSSSwitch"] is None
    assert vmnic1["DVSSwitch"] is None
    assert vmnic1["LinkSpeed"] is None
    assert vmnic1["Duplex"] is None

    assert vmk0["Type"] == "Virtual"
    assert vmk0["Device"] == "vmk0"
    assert vmk0["PortGroupKey"] == "dvportgroup-55"
    assert vmk0["DVSPortGroup"] == "DPG-Management"
    assert vmk0["DVSPortGroupVLAN"] == "100"
    assert vmk0["DVSSwitch"] == "dvs01"
    assert vmk0["DVSMTU"] == 9000
    assert vmk0["IPAddress"] == "10.0.0.11"
    assert vmk0["MTU"] == 9000
    assert vmk0["ManagementTraffic"] is True
    assert vmk0["vMotionTraffic"] is None
    assert vmk0["VSANTraffic"] is None


def test_scoped_and_global_portgroup_index_are_identical(scenario_host, portgroups):
    scoped = resolve_host_network_config(scenario_host, portgroup_index=PortGroupIndex(portgroups, endpoint="vc01"))
    from_all = resolve_host_network_config(scenario_host, all_portgroups=portgroups)

    assert scoped == from_all


def test_distributed_portgroup_miss(scenario_host):
    rows = resolve_host_network_config(scenario_host, portgroup_index=PortGroupIndex(list(), endpoint="vc01"))

    vmk0 = rows[-1]
    assert vmk0["PortGroupKey"] == "dvportgroup-55"
    assert vmk0["DVSPortGroup"] is None
    assert vmk0["DVSPortGroupVLAN"] is None
    # switch is resolved from the host proxy switch, not the index
    assert vmk0["DVSSwitch"] == "dvs01"


def test_standard_portgroup():
    host = make_host(network(
        vnics=[vnic("vmk1", "00:50:56:cc:dd:02", "10.0.1.11", portgroup="Management Network",
                    ipv6=["fe80::1", "2001:db8::11"])],
        vswitches=[vswitch("vSwitch0", 1500, []), vswitch("vSwitch1", 9000, [])],
        portgroups=[host_portgroup("Management Network", 20, "vSwitch1"), host_portgroup("VM Network", 0,
                                                                                          "vSwitch0")]
    ))

    vmk1 = resolve_host_network_config(host, portgroup_index=PortGroupIndex())[0]

    assert vmk1["VSSPortGroup"] == "Management Network"
    assert vmk1["VSSPortGroupVLAN"] == "20"
    assert vmk1["VSSSwitch"] == "vSwitch1"
    assert vmk1["VSSMTU"] == 9000
    assert vmk1["PortGroupKey"] is None
    assert vmk1["DVSSwitch"] is None
    assert vmk1["IPv6Address"] == "fe80::1/64|2001:db8::11/64"


def test_switch_name_and_mtu_come_from_the_same_switch():
    host = make_host(network(
        pnics=[pnic("vmnic1", "00:50:56:aa:bb:02"), pnic("vmnic10", "00:50:56:aa:bb:10")],
        vswitches=[vswitch("vSwitch0", 1500, ["vmnic10"]), vswitch("vSwitch1", 9000, ["vmnic1"])],
    ))

    vmnic1, vmnic10 = resolve_host_network_config(host, portgroup_index=PortGroupIndex())

    assert (vmnic1["VSSSwitch"], vmnic1["VSSMTU"]) == ("vSwitch1", 9000)
    assert (vmnic10["VSSSwitch"], vmnic10["VSSMTU"]) == ("vSwitch0", 1500)


def test_adapter_claimed_by_multiple_switches():
    host = make_host(network(
        pnics=[pnic("vmnic0", "00:50:56:aa:bb:01")],
        vswitches=[vswitch("vSwitch0", 1500, ["vmnic0"]), vswitch("vSwitch1", 9000, ["vmnic0"])],
        proxy_switches=[proxy_switch("dvs01", 1600, ["vmnic0"])]
    ))

    vmnic0 = resolve_host_network_config(host, portgroup_index=PortGroupIndex())[0]

    assert vmnic0["VSSSwitch"] == "vSwitch0|vSwitch1"
    assert vmnic0["VSSMTU"] == "1500|9000"
    assert vmnic0["DVSSwitch"] == "dvs01"
    assert vmnic0["DVSMTU"] == 1600


def test_role_flags():
    host = make_host(
        network(vnics=[vnic("vmk1", None, "10.0.2.1"), vnic("vmk2", None, "10.0.3.1")]),
        roles=[
            net_config("vmotion", "vmk1"),
            net_config("vsan", "vmk2"),
            net_config("vSphereReplication", "vmk1", "vmk2"),
            net_config("faultToleranceLogging", "vmk11")
        ]
    )

    vmk1, vmk2 = resolve_host_network_config(host, portgroup_index=PortGroupIndex())

    assert vmk1["vMotionTraffic"] is True
    assert vmk1["VSANTraffic"] is None
    assert vmk1["ReplicationTraffic"] is True
    assert vmk1["FaultToleranceTraffic"] is None
    assert vmk1["MAC"] is None

    assert vmk2["vMotionTraffic"] is None
    assert vmk2["VSANTraffic"] is True
    assert vmk2["ReplicationTraffic"] is True
    assert vmk2["ManagementTraffic"] is None


def test_host_without_network_config():
    host = make_host(None)

    with pytest.raises(HostConfigError):
        resolve_host_network_config(host, portgroup_index=PortGroupIndex())

    assert issubclass(HostConfigError, FatalLeafError)
