# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

from vinventory.common.misc import grab


class ObjectReference:
    """
    Reference to a managed object (the equivalent of a vSphere MoRef).

    The id of a managed object is only unique within one endpoint. Therefore,
    the endpoint name is part of the reference and two references of different
    endpoints never compare equal.
    """

    __slots__ = ("type", "id", "endpoint")

    def __init__(self, object_type, object_id, endpoint):
        self.type = object_type
        self.id = object_id
        self.endpoint = endpoint

    @classmethod
    def from_value(cls, value, endpoint):
        """
        build a reference from a pyVmomi managed object or return an existing reference

        Parameters
        ----------
        value: ObjectReference, vmodl.ManagedObject
            value of a property which points to another managed object
        endpoint: str
            name of the endpoint the value was returned from

        Returns
        -------
        ObjectReference, None: None if value doesn't look like a managed object
        """

        if value is None:
            return None

        if isinstance(value, ObjectReference):
            return value

        object_id = grab(value, "_moId")
        if object_id is None:
            return None

        return cls(grab(value, "_wsdlName", fallback=value.__class__.__name__), object_id, endpoint)

    def same_endpoint(self, other):
        return isinstance(other, ObjectReference) and self.endpoint == other.endpoint

    def __eq__(self, other):
        if not isinstance(other, ObjectReference):
            return NotImplemented
        return self.same_endpoint(other) and self.type == other.type and self.id == other.id

    def __hash__(self):
        return hash((self.type, self.id, self.endpoint))

    def __repr__(self):
        return f"{self.endpoint}:{self.type}:{self.id}"


class InventoryObject:
    """
    A single object returned by an endpoint query.

    'properties' holds only the requested property paths which were populated
    by the endpoint. Missing properties are "no data" and never raise an error.
    """

    def __init__(self, ref, endpoint, properties=None, managed_object=None):
        self.ref = ref
        self.endpoint = endpoint
        self.properties = properties or dict()
        # live pyVmomi object, used as search root and for lazy lookups
        self.managed_object = managed_object

    @property
    def name(self):
        return self.get("name")

    def get(self, path, fallback=None):
        """
        return a property by its path. Also resolves paths pointing below a
        fetched property: if 'config.network' got fetched, 'config.network.pnic'
        can be requested.
        """

        value = self.properties.get(path)
        if value is not None:
            return value

        for property_path, property_value in self.properties.items():
            if path.startswith(f"{property_path}."):
                return grab(property_value, path[len(property_path) + 1:], fallback=fallback)

        return fallback

    def get_list(self, path):
        value = self.get(path)
        if value is None:
            return list()
        return list(value)

    def __repr__(self):
        return f"InventoryObject({self.ref}, name={self.name!r})"

# EOF
