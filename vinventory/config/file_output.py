# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

import os

from vinventory.config.formatter import DescriptionFormatterMixin
from vinventory.config.group import ConfigOptionGroup
from vinventory.config.option import ConfigOption
from vinventory.common.config import CommonConfig
from vinventory.report.config import ReportConfig
from vinventory.sources.vmware.config import VMWareConfig
from vinventory.common.logging import get_logger
from vinventory.config import default_config_file_path, source_config_section_name
from vinventory.config.files import ConfigFileYAML, get_config_file_type, get_config_file_suffix
from vinventory import __version__, __version_date__, __description__

log = get_logger()


class ConfigFileOutput(DescriptionFormatterMixin):
    """
    writes a documented default config file (INI or YAML, chosen by the file suffix)
    from the declared config options of all sections
    """

    base_config_list = [
        CommonConfig,
        ReportConfig
    ]

    source_config_list = [
        VMWareConfig
    ]

    header = f"Welcome to the {__description__} configuration file."

    _description = """The values in this file override the default values used by the system if
                      a config option is not specified. The commented out lines are the configuration
                      field and the default value used. Uncommenting a line and changing the value
                      will change the value used at runtime when the process is restarted.
                      """

    source_description = """Controls the parameters of a defined endpoint. The string past the slash
                         will be used as the endpoint name. Endpoints can be defined multiple times.
                         """

    def __init__(self, output_file=None):

        self.output_file = output_file or default_config_file_path
        self.config_file_type = get_config_file_type(self.output_file)
        self.lines = list()

    @property
    def comment_prefix(self):
        return self.config_file_type.comment_prefix

    @property
    def is_yaml(self):
        return self.config_file_type is ConfigFileYAML

    def write(self):
        """
        render the config file and write it to 'output_file'. An existing file is never overwritten.

        Returns
        -------
        bool: True if the file was written
        """

        if os.path.exists(self.output_file):
            log.error(f'Config file "{self.output_file}" already present')
            return False

        if self.config_file_type is None:
            log.error(f"Unknown/Unsupported config file type "
                      f"'{get_config_file_suffix(self.output_file)}' for {self.output_file}")
            return False

        try:
            with open(self.output_file, "w") as fp:
                fp.write("\n".join(self.render()))
        except OSError as e:
            log.error(f"Unable to write to file '{self.output_file}': {e}")
            return False

        log.info(f"Default config written to '{self.output_file}'")

        return True

    def render(self):
        """
        return all lines of the config file
        """

        self.lines = list()

        for header_line in [self.header, f"Version: {__version__} ({__version_date__})"]:
            self._line(f"{self.comment_prefix * 3} {header_line}")
            self._blank()

        self._comment_lines(self)
        self._blank()

        for config_section in self.base_config_list:
            config_instance = config_section()
            self._render_section(config_instance, f"[{config_instance.section_name}]",
                                 f"{config_instance.section_name}:", depth=0)

        self._render_section_description(f"{source_config_section_name}/*", self.source_description)

        if self.is_yaml:
            self._blank()
            self._line(f"{source_config_section_name}:")

        for config_section in self.source_config_list:
            config_instance = config_section()
            example = config_instance.source_name_example
            self._render_section(config_instance, f"[{config_instance.section_name}/{example}]",
                                 f"{example}:", depth=1)

        self._blank()
        self._line(f"{self.comment_prefix}EOF")
        self._blank()

        return [x.rstrip() for x in self.lines]

    def _line(self, line: str, depth: int = 0):
        indent = "  " * depth if self.is_yaml else ""
        self.lines.append(f"{indent}{line}")

    def _blank(self):
        if len(self.lines) > 0 and self.lines[-1] != "":
            self.lines.append("")

    def _comment_lines(self, formatter, prefix=None, depth=0):
        for line in formatter.config_description(prefix=prefix or self.comment_prefix).split("\n"):
            self._line(line, depth)

    def _render_section_description(self, section_name, section_description, depth=0):

        wide_prefix = self.comment_prefix * 3

        formatter = DescriptionFormatterMixin()
        formatter._description = section_description

        self._blank()
        self._line(wide_prefix, depth)
        self._line(f"{wide_prefix} [{section_name}]", depth)
        self._line(wide_prefix, depth)
        self._comment_lines(formatter, prefix=wide_prefix, depth=depth)
        self._line(wide_prefix, depth)

    def _render_section(self, config_instance, ini_heading, yaml_heading, depth):

        if config_instance.__doc__ is not None:
            self._render_section_description(config_instance.section_name, config_instance.__doc__, depth)

        self._blank()
        self._line(yaml_heading if self.is_yaml else ini_heading, depth)

        for option in config_instance.options:
            if isinstance(option, ConfigOptionGroup):
                self._render_group(option, depth + 1)
            elif isinstance(option, ConfigOption):
                self._render_option(option, depth + 1)

        self._blank()

    @staticmethod
    def _format_value(value):

        if value is None:
            return ""

        if isinstance(value, bool):
            return f"{value}".lower()

        # lists are written as comma separated string
        if isinstance(value, (list, tuple)):
            return ", ".join(map(str, value))

        return f"{value}"

    def _render_option(self, option, depth):

        if len(option.description()) > 0:
            self._blank()
            self._comment_lines(option, depth=depth)

        # optional settings are written commented out
        key = option.key if option.mandatory is True else f"{self.comment_prefix}{option.key}"

        value = self._format_value(option.default_value if option.default_value is not None
                                   else option.config_example)

        self._line(f"{key}: {value}" if self.is_yaml else f"{key} = {value}", depth)

    def _render_group(self, group, depth):

        if len(group.title or "") > 0:
            self._blank()
            self._line(f"{self.comment_prefix} {group.title} options", depth)

        if len(group.description()) > 0:
            self._blank()
            self._comment_lines(group, depth=depth)

        if len(group.config_example or "") > 0:
            example = DescriptionFormatterMixin()
            example._description = group.config_example
            self._line(self.comment_prefix, depth)
            self._comment_lines(example, depth=depth)

        for option in group.options:
            self._render_option(option, depth)

# EOF
