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

from vinventory.inventory.errors import FolderPathError
from vinventory.inventory.folder_path import (FolderTree, FolderPathSubject, resolve_folder_path,
                                              subject_from_managed_object, subject_from_inventory_object,
                                              folder_properties)
from vinventory.inventory.objects import InventoryObject, ObjectReference


def live_folder(name, parent=None, mo_id=None):
    return SimpleNamespace(_moId=mo_id or f"group-{name}", _wsdlName="Folder", name=name, parent=parent)


def live_chain(*names):
    """build datacenter -> vm -> names[0] -> names[1] ... and return the last folder"""

    current = live_folder("vm", parent=SimpleNamespace(_moId="datacenter-1", name="DC1", parent=None))
    for name in names:
        current = live_folder(name, parent=current)

    return current


def live_vm(parent, devices=None):
    return SimpleNamespace(_moId="vm-1", name="web01", parent=parent,
                           config=SimpleNamespace(hardware=SimpleNamespace(device=devices or list())))


def test_vm_in_root_folder():
    subject = subject_from_managed_object(live_vm(live_chain()), "vc01")

    assert resolve_folder_path(subject) == ("\\", "vc01")


def test_vm_without_parent():
    subject = FolderPathSubject("web01", None, "vc01")

    assert resolve_folder_path(subject) == ("\\", "vc01")


def test_nested_folders():
    subject = subject_from_managed_object(live_vm(live_chain("Linux", "Web")), "vc01")

    assert resolve_folder_path(subject) == ("\\Linux\\Web", "vc01")


@pytest.mark.parametrize("depth", [1, 2, 5, 10])
def test_path_contains_every_folder_below_root(depth):
    names = [f"f{x}" for x in range(1, depth + 1)]
    subject = subject_from_managed_object(live_vm(live_chain(*names)), "vc01")

    path, _ = resolve_folder_path(subject)

    assert path == "\\" + "\\".join(names)
    assert not path.endswith("\\")
    assert "vm" not in path.split("\\")


def test_max_depth():
    subject = subject_from_managed_object(live_vm(live_chain("a", "b", "c")), "vc01")

    assert resolve_folder_path(subject, max_depth=3) == ("\\a\\b\\c", "vc01")

    deeper = subject_from_managed_object(live_vm(live_chain("a", "b", "c", "d")), "vc01")

    with pytest.raises(FolderPathError):
        resolve_folder_path(deeper, max_depth=3)


def test_chain_without_root_folder():
    orphan = live_folder("Linux", parent=live_folder("Detached"))
    subject = subject_from_managed_object(live_vm(orphan), "vc01")

    with pytest.raises(FolderPathError):
        resolve_folder_path(subject)


def test_cycle_in_folder_chain():
    folder_a = live_folder("a")
    folder_b = live_folder("b", parent=folder_a)
    folder_a.parent = folder_b

    subject = subject_from_managed_object(live_vm(folder_b), "vc01")

    with pytest.raises(FolderPathError):
        resolve_folder_path(subject)


def test_live_subject_mac_address():
    devices = [SimpleNamespace(deviceInfo=SimpleNamespace(label="Hard disk 1")),
               SimpleNamespace(macAddress="00:50:56:aa:bb:cc")]

    subject = subject_from_managed_object(live_vm(live_chain(), devices), "vc01")

    assert subject.name == "web01"
    assert subject.mac_address == "00:50:56:AA:BB:CC"


def folder(endpoint, folder_id, name, parent_id=None):
    parent = None
    if parent_id is not None:
        parent = ObjectReference("Folder", parent_id, endpoint)
    return InventoryObject(ObjectReference("Folder", folder_id, endpoint), endpoint, {"name": name, "parent": parent})


@pytest.fixture
def folder_tree():
    return FolderTree([
        folder("vc01", "group-v1", "vm", "group-d1"),
        folder("vc01", "group-v2", "Linux", "group-v1"),
        folder("vc01", "group-v3", "Web", "group-v2"),
    ])


def query_vm(parent_id, managed_object=None):
    return InventoryObject(ObjectReference("VirtualMachine", "vm-1", "vc01"), "vc01", {
        "name": "web01",
        "parent": ObjectReference("Folder", parent_id, "vc01")
    }, managed_object=managed_object)


def test_folder_tree_subject(folder_tree):
    assert len(folder_tree) == 3
    assert folder_properties == ["name", "parent"]

    subject = subject_from_inventory_object(query_vm("group-v3"), folder_tree)

    assert resolve_folder_path(subject) == ("\\Linux\\Web", "vc01")

    root_subject = subject_from_inventory_object(query_vm("group-v1"), folder_tree)

    assert resolve_folder_path(root_subject) == ("\\", "vc01")


def test_both_subjects_resolve_the_same_path(folder_tree):
    from_tree = subject_from_inventory_object(query_vm("group-v3"), folder_tree)
    from_live = subject_from_managed_object(live_vm(live_chain("Linux", "Web")), "vc01")

    assert resolve_folder_path(from_tree) == resolve_folder_path(from_live)


def test_unknown_parent_folder(folder_tree):
    with pytest.raises(FolderPathError):
        subject_from_inventory_object(query_vm("group-v99"), folder_tree)


def test_unknown_parent_folder_uses_live_chain(folder_tree):
    vm = query_vm("group-v99", managed_object=live_vm(live_chain("vApps")))

    subject = subject_from_inventory_object(vm, folder_tree)

    assert resolve_folder_path(subject) == ("\\vApps", "vc01")
