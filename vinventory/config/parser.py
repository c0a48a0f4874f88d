# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import os

from vinventory.common.logging import get_logger
from vinventory.common.misc import do_error_exit
from vinventory.config import (default_config_file_path, common_config_section_name, report_config_section_name,
                               source_config_section_name, env_var_prefix, env_var_source_prefix)
from vinventory.config.files import get_config_file_type, get_config_file_suffix, ConfigFileReadError

log = get_logger()

# base directory for relative config file paths
project_base_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class ConfigParser:
    """
    Singleton which reads all config files and the config environment variables.

    Files are read in the order they were added, later files override single
    options of earlier ones. Environment variables are applied last. Endpoint
    sections are merged per endpoint name.
    """

    file_list = list()
    content = dict()
    config_errors = list()
    config_warnings = list()
    parsing_finished = False

    def __new__(cls):
        instance = cls.__dict__.get("_instance")
        if instance is None:
            instance = cls._instance = object.__new__(cls)
            instance.init()
        return instance

    def init(self):
        """
        reset all parsed data
        """
        self.file_list = list()
        self.content = dict()
        self.config_errors = list()
        self.config_warnings = list()
        self.parsing_finished = False

    @staticmethod
    def get_config_file_path(config_file: str) -> str:
        """
        return the absolute path of a config file, relative paths are relative to the project base directory
        """

        if not isinstance(config_file, str) or len(config_file) == 0:
            raise ValueError(f"Invalid config file path '{config_file}'")

        return os.path.realpath(os.path.join(project_base_dir, config_file))

    def add_config_file(self, config_file_name: str):

        if isinstance(config_file_name, str) and len(config_file_name) > 0:
            self.file_list.append(self.get_config_file_path(config_file_name))

    def add_config_file_list(self, config_file_name_list: list):

        for config_file_name in config_file_name_list or list():
            self.add_config_file(config_file_name)

    def log_end_exit_on_errors(self):

        for warning in self.config_warnings:
            log.warning(warning)

        if len(self.config_errors) == 0:
            return

        for error in self.config_errors:
            log.error(error)

        do_error_exit("Unable to open/parse one or more config files")

    def _file_problem(self, config_file):

        if not os.path.exists(config_file):
            return f'Config file "{config_file}" not found'
        if not os.path.isfile(config_file):
            return f'Config file "{config_file}" is not an actual file'
        if not os.access(config_file, os.R_OK):
            return f'Config file "{config_file}" not readable'

    def read_config(self):
        """
        Read all config files and environment variables into 'content'
        """

        if self.parsing_finished is True:
            return

        # the default config file is only used if no other file was defined
        default_config_file = self.get_config_file_path(default_config_file_path)
        if len(self.file_list) == 0 and os.path.exists(default_config_file):
            self.file_list.append(default_config_file)

        readable_files = list()
        for config_file in self.file_list:

            problem = self._file_problem(config_file)
            if problem is not None:
                self.config_errors.append(problem)
                continue

            readable_files.append(config_file)

            config_file_type = get_config_file_type(config_file)
            if config_file_type is None:
                self.config_errors.append(f"Unknown/Unsupported config file type "
                                          f"'{get_config_file_suffix(config_file)}' for {config_file}")
                continue

            try:
                self._merge(config_file_type.read(config_file), config_file)
            except ConfigFileReadError as e:
                self.config_errors.append(f"{e}")

        self.file_list = readable_files

        for section in [common_config_section_name, report_config_section_name]:
            self._merge({section: self._section_env_vars(section)}, "environment")

        self._merge({source_config_section_name: self._source_env_vars()}, "environment")

        self.parsing_finished = True

    def _merge(self, config_data, origin):

        if not isinstance(config_data, dict):
            self.config_errors.append(f"Parsed config data from '{origin}' is not a dictionary")
            return

        for section, section_data in config_data.items():

            if section_data is None:
                continue

            if not isinstance(section_data, dict):
                self.config_errors.append(f"Config section '{section}' from '{origin}' is not a dictionary")
                continue

            section_content = self.content.setdefault(f"{section}", dict())

            if section != source_config_section_name:
                section_content.update({f"{k}": v for k, v in section_data.items()})
                continue

            for source_name, source_data in section_data.items():

                if not isinstance(source_data, dict):
                    self.config_errors.append(f"Config data for endpoint '{source_name}' from '{origin}' "
                                              f"is not a dictionary")
                    continue

                section_content.setdefault(f"{source_name}", dict()).update(source_data)

    @staticmethod
    def _section_env_vars(section):
        """
        options of a section from env vars named VINV_<SECTION>_<OPTION>
        """

        prefix = f"{env_var_prefix}_{section}_".upper()

        return {
            key[len(prefix):].lower(): value for key, value in os.environ.items() if key.upper().startswith(prefix)
        }

    def _source_env_vars(self):
        """
        Endpoints are defined by index:
            VINV_SOURCE_<index>_NAME      name of the endpoint
            VINV_SOURCE_<index>_<OPTION>  option of this endpoint
        """

        prefix = f"{env_var_source_prefix}_"

        options_by_index = dict()
        for key, value in os.environ.items():
            if not key.upper().startswith(prefix):
                continue

            index, _, option = key[len(prefix):].partition("_")
            if len(option) == 0:
                self.config_warnings.append(f"Ignoring ENV var '{key}', expected '{prefix}<index>_<option>'")
                continue

            options_by_index.setdefault(index, dict())[option.lower()] = value

        sources = dict()
        for index, options in options_by_index.items():

            source_name = options.pop("name", None)
            if source_name is None:
                for option in options:
                    self.config_warnings.append(f"Found ENV var '{prefix}{index}_{option.upper()}' which cannot "
                                                f"be associated with any source due to missing "
                                                f"'{prefix}{index}_NAME' var")
                continue

            if len(options) > 0:
                sources[source_name] = options

        return sources

# EOF
