# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

from vinventory.common.misc import grab
from vinventory.common.logging import get_logger
from vinventory.config.parser import ConfigParser
from vinventory.config.option import ConfigOption
from vinventory.config.group import ConfigOptionGroup

log = get_logger()


class ConfigOptions:
    """
    parsed config values of one section, accessible as attributes. Undefined options return None.
    """

    def __init__(self, **kwargs):
        for name in kwargs:
            setattr(self, name, kwargs[name])

    def __eq__(self, other):
        if not isinstance(other, ConfigOptions):
            return NotImplemented
        return vars(self) == vars(other)

    def __contains__(self, key):
        return key in self.__dict__

    def __getattr__(self, item):
        # only called if regular attribute lookup failed
        if item.startswith("__"):
            raise AttributeError(item)
        return None

    def __repr__(self):
        return f"ConfigOptions({', '.join(sorted(self.__dict__.keys()))})"


class ConfigBase:
    """
        Base class to parse config data of a config section
    """

    section_name = None
    _parsing_failed = False

    options = list()
    config_content = dict()

    def __init__(self):

        self._parsing_failed = False

        config = ConfigParser()
        if config.parsing_finished is True:
            self.config_content = config.content

    # stub function, needs to be implemented in each config class with special options
    def validate_options(self):
        pass

    def set_validation_failed(self):
        self._parsing_failed = True

    def get_option_by_name(self, name: str) -> ConfigOption:
        for option in self.options:
            if option.key == name:
                return option

    @property
    def config_option_location(self):

        location = self.section_name
        if getattr(self, "source_name", None) is not None:
            location += f".{self.source_name}"

        return location

    def _section_content(self):
        """
        config data of this section, for endpoint sections the data of this endpoint
        """

        section_content = self.config_content.get(self.section_name)

        source_name = getattr(self, "source_name", None)
        if source_name is not None:
            section_content = grab(section_content, source_name, separator="|")

        if not isinstance(section_content, dict):
            return dict()

        return {f"{k}".lower(): v for k, v in section_content.items()}

    def _flat_options(self) -> list:

        flat_options = list()
        for config_object in self.options:
            if isinstance(config_object, ConfigOptionGroup):
                flat_options.extend(config_object.options)
            elif isinstance(config_object, ConfigOption):
                flat_options.append(config_object)

        return flat_options

    def parse(self, do_log: bool = True):
        """
        Read all options of this section from the parsed config content, validate them and
        return a ConfigOptions object. Exits the program if the validation failed.

        Parameters
        ----------
        do_log: bool
            log parsed values and warnings. Disabled while logging is not set up yet.

        Returns
        -------
        ConfigOptions: parsed options of this section
        """

        def _log(handler, message):
            if do_log is True:
                handler(message)

        if self.section_name is None:
            raise KeyError(f"Class '{self.__class__.__name__}' is missing 'section_name' attribute")

        location = self.config_option_location
        section_content = self._section_content()

        all_options = self._flat_options()

        for option in all_options:

            option.set_value(section_content.get(option.key))

            _log(log.debug, f"Config: {location}.{option.key} = {option.sensitive_value}")

            if option.mandatory is True and option.value is None:
                _log(log.error, f"Config option '{option.key}' in '{location}' can't be empty/undefined")
                self.set_validation_failed()

            if option.parsing_failed is True:
                self.set_validation_failed()

        self.options = all_options

        known_keys = {x.key for x in all_options}
        for unknown_key in [x for x in section_content.keys() if x not in known_keys]:
            _log(log.warning, f"Found unknown config option '{unknown_key}' for '{location}' config")

        self.validate_options()

        if self._parsing_failed is True:
            log.error(f"Config validation for '{location}' failed. Exit!")
            exit(1)

        return ConfigOptions(**{x.key: x.value for x in self.options})

# EOF
