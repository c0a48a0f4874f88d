# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

from vinventory.common.logging import get_logger
from vinventory.common.misc import grab
from vinventory.common.support import normalize_mac_address
from vinventory.inventory import vm_root_folder_name, default_max_folder_depth
from vinventory.inventory.errors import FolderPathError
from vinventory.inventory.objects import ObjectReference

log = get_logger()

folder_path_separator = "\\"

# properties needed to build a FolderTree
folder_properties = ["name", "parent"]


class FolderPathSubject:
    """
    The VM data the folder path resolver works on. Both VM representations
    (live managed objects and query results) are adapted into this shape.
    """

    def __init__(self, name, parent_folder, owner_endpoint, mac_address=None):
        self.name = name
        self.parent_folder = parent_folder
        self.owner_endpoint = owner_endpoint
        self.mac_address = mac_address


class LiveFolderNode:
    """
    folder node backed by a pyVmomi managed object, every attribute access
    can result in a request to the endpoint
    """

    def __init__(self, managed_object):
        self._managed_object = managed_object

    @property
    def key(self):
        return grab(self._managed_object, "_moId", fallback=id(self._managed_object))

    @property
    def name(self):
        return grab(self._managed_object, "name")

    @property
    def parent(self):
        parent = grab(self._managed_object, "parent")
        if parent is None:
            return None
        return LiveFolderNode(parent)


class TreeFolderNode:
    """
    folder node backed by a FolderTree built from a single folder query
    """

    def __init__(self, tree, ref, name, parent_ref):
        self._tree = tree
        self.key = ref
        self.name = name
        self._parent_ref = parent_ref

    @property
    def parent(self):
        return self._tree.node(self._parent_ref)


class FolderTree:
    """
    all folders of one endpoint, indexed by reference
    """

    def __init__(self, folders=None):
        self._folders = dict()

        for folder in folders or list():
            self._folders[folder.ref] = (folder.name, ObjectReference.from_value(folder.get("parent"),
                                                                                 folder.endpoint))

    def __contains__(self, ref):
        return ref in self._folders

    def __len__(self):
        return len(self._folders)

    def node(self, ref):

        if ref is None or ref not in self._folders:
            return None

        name, parent_ref = self._folders[ref]

        return TreeFolderNode(self, ref, name, parent_ref)


def _first_mac_address(devices):

    for device in devices or list():
        mac_address = normalize_mac_address(grab(device, "macAddress"))
        if mac_address is not None:
            return mac_address


def subject_from_managed_object(vm, endpoint):
    """
    adapt a live pyVmomi VirtualMachine object

    Parameters
    ----------
    vm: vim.VirtualMachine
        the VM, parent folders are read from vm.parent
    endpoint: str
        name of the endpoint the VM belongs to

    Returns
    -------
    FolderPathSubject
    """

    parent = grab(vm, "parent")

    return FolderPathSubject(
        name=grab(vm, "name"),
        parent_folder=LiveFolderNode(parent) if parent is not None else None,
        owner_endpoint=endpoint,
        mac_address=_first_mac_address(grab(vm, "config.hardware.device"))
    )


def subject_from_inventory_object(vm, folder_tree):
    """
    adapt a VM query result. The VM needs the 'parent' property, its parent folders
    are looked up in 'folder_tree'. If the parent is not a known folder the
    VM's managed object (if present) is used to ascend the live parent chain.

    Parameters
    ----------
    vm: InventoryObject
        VM returned by a query
    folder_tree: FolderTree
        all folders of the VM's endpoint

    Returns
    -------
    FolderPathSubject
    """

    parent_ref = ObjectReference.from_value(vm.get("parent"), vm.endpoint)

    parent_folder = None
    if parent_ref is not None:
        parent_folder = folder_tree.node(parent_ref)

        if parent_folder is None and vm.managed_object is not None:
            log.debug2(f"Parent '{parent_ref}' of VM '{vm.name}' is not a known folder, using live parent chain")
            return subject_from_managed_object(vm.managed_object, vm.endpoint)

        if parent_folder is None:
            raise FolderPathError(f"Parent '{parent_ref}' of VM '{vm.name}' is not a known folder")

    return FolderPathSubject(
        name=vm.name,
        parent_folder=parent_folder,
        owner_endpoint=vm.endpoint,
        mac_address=_first_mac_address(vm.get("config.hardware.device"))
    )


def resolve_folder_path(subject, max_depth=default_max_folder_depth):
    """
    Resolve the folder path of a VM relative to the datacenter VM root folder.

        VM directly in the root folder:  \\
        VM in folder "Linux/Web":         \\Linux\\Web

    The root folder itself (named "vm") is never part of the path.

    Parameters
    ----------
    subject: FolderPathSubject
        the VM to resolve the path for
    max_depth: int
        maximum number of parent folders to ascend

    Returns
    -------
    tuple: (folder path, owner endpoint)

    Raises
    ------
    FolderPathError: if the folder chain never reaches the root folder, contains a cycle or is too deep
    """

    current = subject.parent_folder

    if current is None or current.name == vm_root_folder_name:
        return folder_path_separator, subject.owner_endpoint

    path_elements = [f"{current.name}"]
    visited = {current.key}

    while True:

        parent = current.parent

        if parent is None:
            raise FolderPathError(f"Folder chain of VM '{subject.name}' ends at '{current.name}' "
                                  f"without reaching the '{vm_root_folder_name}' root folder")

        if parent.name == vm_root_folder_name:
            break

        if len(path_elements) >= max_depth:
            raise FolderPathError(f"Folder chain of VM '{subject.name}' exceeds maximum depth of {max_depth}")

        if parent.key in visited:
            raise FolderPathError(f"Folder chain of VM '{subject.name}' contains a cycle at '{parent.name}'")

        visited.add(parent.key)
        path_elements.insert(0, f"{parent.name}")
        current = parent

    return folder_path_separator + folder_path_separator.join(path_elements), subject.owner_endpoint

# EOF
