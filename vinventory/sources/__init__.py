# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

from vinventory.sources.vmware.connection import VMWareHandler

from vinventory.common.logging import get_logger
from vinventory.config.parser import ConfigParser
from vinventory.config.base import ConfigOptions
from vinventory.config import source_config_section_name

# all available endpoint handlers
valid_sources = [VMWareHandler]

# attributes every handler has to provide and their type after initialization
handler_attributes = {
    "init_successful": bool,
    "name": str,
    "settings": ConfigOptions,
    "source_type": str,
}


def validate_source(source_class_object=None, state="pre"):
    """
    Check a handler class ("pre") or an initialized handler ("post") for all attributes in 'handler_attributes'.

    Raises
    ------
    AttributeError: if an attribute is missing
    ValueError: if an attribute of an initialized handler has the wrong type or is empty
    """

    for attr, value_type in handler_attributes.items():

        value = getattr(source_class_object, attr)

        if state == "pre":
            continue

        if not isinstance(value, value_type):
            raise ValueError(f"Value for attribute '{attr}' needs to be {value_type}")

        if isinstance(value, str) and len(value) == 0:
            raise ValueError(f"Value for attribute '{attr}' can't be empty.")


def get_handler_class(source_type):

    return next((x for x in valid_sources if x.implements(source_type)), None)


def instantiate_sources():
    """
    Create a handler for every configured endpoint and connect to it.
    Endpoints which are disabled or unreachable are left out.

    Returns
    -------
    list: of connected endpoint handlers
    """

    log = get_logger()

    for handler_class in valid_sources:
        validate_source(handler_class)

    config_content = ConfigParser().content
    endpoint_sections = dict()
    if isinstance(config_content, dict):
        endpoint_sections = config_content.get(source_config_section_name) or dict()

    endpoints = list()

    for endpoint_name, endpoint_config in endpoint_sections.items():

        source_type = endpoint_config.get("type")
        if source_type is None:
            log.error(f"Source {endpoint_name} option 'type' is undefined")
            continue

        handler_class = get_handler_class(source_type)
        if handler_class is None:
            log.error(f"Unknown source type '{source_type}' defined for '{endpoint_name}'")
            continue

        handler = handler_class(name=endpoint_name)

        validate_source(handler, "post")

        if handler.init_successful is True:
            endpoints.append(handler)

    log.info(f"{len(endpoints)} of {len(endpoint_sections)} configured endpoint(s) connected")

    return endpoints

# EOF
