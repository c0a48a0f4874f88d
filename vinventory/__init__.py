# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

__version__ = "1.0.0"
__version_date__ = "2025-06-02"
__author__ = "Ricardo Bartels <ricardo.bartels@telekom.de>"
__description__ = "vCenter Inventory"
__license__ = "MIT"
