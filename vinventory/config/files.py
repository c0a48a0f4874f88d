# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import os
import configparser

import yaml

from vinventory.config import source_config_section_name


class ConfigFileReadError(Exception):
    pass


def read_ini_file(config_file):
    """
    Read an INI file. Endpoint sections are named '[source/<name>]' and get
    collected below the 'source' key.

    Raises
    ------
    ConfigFileReadError: if the file can't be opened or parsed
    """

    ini_parser = configparser.ConfigParser(strict=True, allow_no_value=True,
                                           empty_lines_in_values=False, interpolation=None)

    try:
        with open(config_file) as fp:
            ini_parser.read_file(fp)
    except configparser.Error as e:
        raise ConfigFileReadError(f"Problem while parsing config file '{config_file}': {e}")
    except OSError as e:
        raise ConfigFileReadError(f"Unable to open file '{config_file}': {e}")

    source_prefix = f"{source_config_section_name}/"
    data = {source_config_section_name: dict()}

    for section in ini_parser.sections():
        if section.startswith(source_prefix):
            data[source_config_section_name][section[len(source_prefix):]] = dict(ini_parser.items(section))
        else:
            data[section] = dict(ini_parser.items(section))

    return data


def read_yaml_file(config_file):
    """
    Read a YAML file. A top level 'sources' key is accepted as alias for 'source'.

    Raises
    ------
    ConfigFileReadError: if the file can't be opened or parsed
    """

    try:
        with open(config_file) as fp:
            data = yaml.safe_load(fp)
    except yaml.YAMLError as e:
        raise ConfigFileReadError(f"Problem while parsing config file '{config_file}': {e}")
    except OSError as e:
        raise ConfigFileReadError(f"Unable to open file '{config_file}': {e}")

    if data is None:
        return dict()

    if isinstance(data, dict) and "sources" in data and source_config_section_name not in data:
        data[source_config_section_name] = data.pop("sources")

    return data


class ConfigFileType:
    """
    a supported config file format, identified by the file suffix
    """

    def __init__(self, name: str, suffixes: list, comment_prefix: str, reader):
        self.name = name
        self.suffixes = suffixes
        self.comment_prefix = comment_prefix
        self.reader = reader

    def read(self, config_file):
        return self.reader(config_file)

    def __repr__(self):
        return f"ConfigFileType({self.name})"


ConfigFileINI = ConfigFileType("ini", ["ini"], ";", read_ini_file)
ConfigFileYAML = ConfigFileType("yaml", ["yml", "yaml"], "#", read_yaml_file)

supported_config_file_types = [ConfigFileINI, ConfigFileYAML]


def get_config_file_suffix(config_file_name):

    if not isinstance(config_file_name, str):
        return

    return os.path.splitext(config_file_name)[1].lower().lstrip(".")


def get_config_file_type(config_file_name):
    """
    return the matching ConfigFileType for a file name or None if the suffix is unknown
    """

    suffix = get_config_file_suffix(config_file_name)

    return next((x for x in supported_config_file_types if suffix in x.suffixes), None)

# EOF
