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

from vinventory.config.parser import ConfigParser
from vinventory.inventory.errors import QueryFailed
from vinventory.inventory.objects import InventoryObject, ObjectReference


class FakeEndpoint:
    """
    In-memory endpoint. Objects are stored with their containment parent,
    a query with a search root returns all objects below this root.
    Only requested properties are returned, like a property collector does.
    """

    # a view of a type also returns the objects of its subtypes
    view_types = {
        "ComputeResource": ["ComputeResource", "ClusterComputeResource"]
    }

    def __init__(self, name="vc01", version="8.0.2", settings=None):
        self.name = name
        self.version = version
        self.settings = settings or SimpleNamespace()
        self.licenses = list()
        self.fail_on = set()
        self.queries = list()
        self._objects = list()
        self._parents = dict()

    def add(self, object_type, object_id, name=None, parent=None, properties=None, ref_type=None):

        properties = dict(properties or dict())
        if name is not None:
            properties["name"] = name

        ref = ObjectReference(ref_type or object_type, object_id, self.name)

        parent_id = parent.ref.id if isinstance(parent, InventoryObject) else parent
        self._parents[object_id] = parent_id
        self._objects.append((object_type, ref, properties))

        return InventoryObject(ref, self.name, properties)

    def _is_below(self, object_id, root_id):

        visited = set()
        current = self._parents.get(object_id)
        while current is not None and current not in visited:
            if current == root_id:
                return True
            visited.add(current)
            current = self._parents.get(current)

        return False

    def query_objects(self, object_type, properties, search_root=None):

        self.queries.append((object_type, None if search_root is None else search_root.ref.id))

        if object_type in self.fail_on:
            raise QueryFailed(self.name, object_type, "simulated failure")

        result = list()
        for stored_type, ref, stored_properties in self._objects:

            if stored_type not in self.view_types.get(object_type, [object_type]):
                continue

            if search_root is not None and not self._is_below(ref.id, search_root.ref.id):
                continue

            result.append(InventoryObject(ref, self.name, {
                k: v for k, v in stored_properties.items() if k in properties and v is not None
            }))

        return result

    def query_licenses(self):

        if "LicenseManager" in self.fail_on:
            raise QueryFailed(self.name, "LicenseManager", "simulated failure")

        return self.licenses


def managed_object(wsdl_name, mo_id, **kwargs):
    """a stand-in for a pyVmomi managed object reference"""
    return SimpleNamespace(_wsdlName=wsdl_name, _moId=mo_id, **kwargs)


@pytest.fixture
def fake_endpoint():
    return FakeEndpoint()


@pytest.fixture
def config_parser():
    """a reset config parser singleton, restored after the test"""

    parser = ConfigParser()
    parser.init()

    yield parser

    parser.init()


@pytest.fixture
def endpoint_factory():
    return FakeEndpoint


@pytest.fixture
def mo():
    return managed_object
