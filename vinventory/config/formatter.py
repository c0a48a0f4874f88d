# -*- coding: utf-8 -*-
#  Copyright (c) 2020 - 2025 Ricardo Bartels. All rights reserved.
#
#  vcenter-inventory.py
#
#  This work is licensed under the terms of the MIT license.
#  For a copy, see file LICENSE.txt included in this
#  repository or visit: <https://opensource.org/licenses/MIT>.

from textwrap import fill, indent, dedent

default_output_width = 90


class DescriptionFormatterMixin:
    """
    renders the '_description' of a config option, option group or section
    """

    _description = ""

    def description(self, width: int = default_output_width) -> str:
        """
        return description wrapped at 'width'

        If the description starts with a blank character it is treated as preformatted:
        indentation gets removed and NO line wrapping will be applied.
        """

        if not isinstance(width, int):
            raise ValueError("value for 'width' must be of type int")

        if self._description is None:
            return ""

        if self._description.startswith(" "):
            return dedent(self._description.rstrip())

        return fill(" ".join(self._description.split()), width=width)

    def config_description(self, prefix: str = "#", width: int = default_output_width) -> str:
        """
        description with every line prefixed by 'prefix' and a blank, used as config file comment
        """

        if not isinstance(prefix, str):
            raise ValueError("value for 'prefix' must be of type str")

        prefix += " "

        return indent(self.description(max(3, width - len(prefix))), prefix, lambda line: True)
