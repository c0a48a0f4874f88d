# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

from typing import Any

from vinventory.config.formatter import DescriptionFormatterMixin
from vinventory.common.logging import get_logger
from vinventory.common.misc import quoted_split

log = get_logger()

true_values = ["true", "t", "1", "yes", "on"]
false_values = ["false", "f", "0", "no", "off"]


class ConfigOption(DescriptionFormatterMixin):
    """
    handles all attributes of a single config option

    value_type can be one of bool, int, str or list. A list option accepts
    a comma separated string (quotes protect commas) or a YAML list.
    If 'choices' is defined every value has to be part of it.
    """

    def __init__(self,
                 key: str,
                 value_type: Any,
                 description: str = "",
                 default_value: Any = None,
                 config_example: Any = None,
                 mandatory: bool = False,
                 choices: list = None,
                 sensitive: bool = False):

        self.key = key
        self._value = None
        self.value_type = value_type
        self._description = description
        self.default_value = default_value
        self.config_example = config_example
        self.mandatory = mandatory
        self.choices = choices
        self.sensitive = sensitive
        self.parsing_failed = False

        if value_type not in [bool, int, str, list]:
            raise ValueError(f"unsupported value type '{value_type}' for option '{self.key}'")

        if self.config_example is None:
            self.config_example = self.default_value

        if self.default_value is not None:
            self.set_value(self.default_value)

        if not isinstance(self._description, str):
            raise ValueError(f"value for 'description' of '{self.key}' must be of type str")

    def __repr__(self):
        return f"{self.key}: {self.sensitive_value}"

    @property
    def value(self):
        return self._value

    @property
    def sensitive_value(self):

        if self.sensitive is True and self._value is not None:
            return str(self._value)[0:3] + "***"

        return self._value

    @staticmethod
    def to_bool(value):
        """
        converts a config value to a boolean

        Raises
        ------
        ValueError: if value can't be interpreted as boolean
        """

        if isinstance(value, bool):
            return value

        if isinstance(value, int) and value in [0, 1]:
            return bool(value)

        text = f"{value}".strip().lower()
        if text in true_values:
            return True
        if text in false_values:
            return False

        raise ValueError(f"'{value}' is not a boolean")

    @staticmethod
    def to_list(value):

        if isinstance(value, (list, tuple)):
            return [f"{x}".strip() for x in value if len(f"{x}".strip()) > 0]

        return quoted_split(f"{value}")

    def _convert(self, value):
        """
        return value converted to 'value_type', str values are kept as they are

        Raises
        ------
        ValueError, TypeError: if the value can't be converted
        """

        if self.value_type == bool:
            return self.to_bool(value)

        if self.value_type == int:
            return int(value)

        if self.value_type == list:
            return self.to_list(value)

        # str options can also hold already processed values like compiled regular expressions
        return value

    def set_value(self, value):
        """
        Convert and validate 'value' and store it. A value of None or an empty string
        keeps the current value. Conversion or validation problems set 'parsing_failed'.
        """

        if value is None or (isinstance(value, str) and len(value) == 0):
            return

        try:
            config_value = self._convert(value)
        except (ValueError, TypeError):
            log.error(f"Unable to parse '{value}' for '{self.key}' as {self.value_type.__name__}")
            self.parsing_failed = True
            return

        if self.choices is not None:
            invalid = [x for x in (config_value if isinstance(config_value, list) else [config_value])
                       if x not in self.choices]
            if len(invalid) > 0:
                log.error(f"Invalid value '{', '.join(map(str, invalid))}' for '{self.key}'. "
                          f"Valid values: {', '.join(map(str, self.choices))}")
                self.parsing_failed = True
                return

        self._value = config_value

# EOF
