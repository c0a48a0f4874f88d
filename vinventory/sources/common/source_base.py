# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.


class SourceBase:
    """
    This is the base class for all inventory source classes (endpoints).
    """

    settings = None
    init_successful = False
    name = None

    @classmethod
    def implements(cls, source_type):

        if getattr(cls, "source_type", None) == source_type:
            return True

        return False

    # stub function to implement a finish call for each source
    def finish(self):
        pass

    def query_objects(self, object_type, properties, search_root=None):
        raise NotImplementedError(f"Source '{self.name}' does not implement object queries")

    def __repr__(self):
        return f"{self.__class__.__name__}({self.name!r})"

# EOF
