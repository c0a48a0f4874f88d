# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

# names of all available reports in the order they get generated
valid_report_names = [
    "vm",
    "vm_network",
    "host",
    "host_network",
    "host_services",
    "license",
    "datacenter_summary",
    "cluster_summary",
    "endpoint_summary"
]

default_timestamp_format = "%Y%m%d-%H%M%S"
