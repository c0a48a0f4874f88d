# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import re

from vinventory.config.option import ConfigOption
from vinventory.common.logging import get_logger

log = get_logger()


def endpoint_enabled_option():
    return ConfigOption("enabled",
                        bool,
                        description="Defines if this endpoint gets queried. Disabled endpoints are skipped",
                        default_value=True)


def endpoint_type_option(source_type):
    """
    the mandatory 'type' option of an endpoint section, selects the handler class
    """

    return ConfigOption("type",
                        str,
                        description="type of endpoint. This defines which handler is used to connect to it",
                        config_example=source_type,
                        mandatory=True)


def compile_filter_option(option, source_name):
    """
    replace the value of an include/exclude filter option with the compiled regex

    Returns
    -------
    bool: False if the expression could not be compiled
    """

    try:
        option.set_value(re.compile(option.value))
    except re.error as e:
        log.error(f"Problem parsing regular expression for '{source_name}.{option.key}': {e}")
        return False

    return True
