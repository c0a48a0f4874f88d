# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

default_config_file_path = "./settings.ini"

common_config_section_name = "common"
report_config_section_name = "report"
source_config_section_name = "source"

env_var_prefix = "VINV"
env_var_source_prefix = f"{env_var_prefix}_{source_config_section_name.upper()}"
