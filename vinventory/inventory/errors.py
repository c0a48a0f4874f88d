# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.


class InventoryError(Exception):
    """
    base class of all errors raised while querying or walking an inventory
    """


class ConnectionUnavailable(InventoryError):
    """
    no live session to the endpoint exists. Aborts the current report.
    """


class QueryFailed(InventoryError):

    def __init__(self, endpoint, object_type, reason):
        self.endpoint = endpoint
        self.object_type = object_type
        self.reason = reason
        super().__init__(f"Query for '{object_type}' on endpoint '{endpoint}' failed: {reason}")


class FolderPathError(InventoryError):
    pass


class FatalLeafError(InventoryError):
    """
    a failure while processing a single host/VM which aborts the whole report
    instead of just skipping this host/VM
    """


class HostConfigError(FatalLeafError):
    pass


class DeadlineExceeded(InventoryError):
    pass

# EOF
