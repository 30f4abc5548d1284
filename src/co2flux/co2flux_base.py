"""co2flux: air-sea CO2 flux diagnostics for ocean carbon models.

Copyright (C), 2020 Ulrich G. Wortmann

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

from __future__ import annotations

import time

import numpy as np


class KeywordError(Exception):
    """Exception raised for errors in keyword arguments.

    Parameters
    ----------
    message : str
        Explanation of the error

    Examples
    --------
    >>> raise KeywordError("Invalid keyword 'xyz'")
    """

    def __init__(self, message):
        message = f"\n\n{message}\n"
        super().__init__(message)


class MissingKeywordError(Exception):
    """Exception raised when a required keyword argument is missing.

    Parameters
    ----------
    message : str
        Explanation of the error

    Examples
    --------
    >>> raise MissingKeywordError("'model' is a mandatory keyword")
    """

    def __init__(self, message):
        message = f"\n\n{message}\n"
        super().__init__(message)


class InputError(Exception):
    """Exception raised for errors in the input parameters.

    Parameters
    ----------
    message : str
        Explanation of the error

    Examples
    --------
    >>> raise InputError("Value must be positive")
    """

    def __init__(self, message):
        message = f"\n\n{message}\n"
        super().__init__(message)


class InputParsing:
    """Provides various routines to parse and process keyword arguments.

    All derived classes need to declare the allowed keyword arguments,
    their default values and the type in the following format:

    defaults = {"key": [value, (allowed instances)]}

    The recommended sequence is to first set default values via
    __register_variable_names__() and then update with provided values
    using __update_dict_entries__(defaults, kwargs).

    Notes
    -----
    This class is not meant to be instantiated directly.
    """

    # keys that must be strictly positive, or at least zero, if numeric
    positive_keys: tuple = (
        "reference_density",
        "schmidt_dic_coeff5",
        "dt",
        "salinity",
    )
    non_negative_keys: tuple = (
        "surface_wind_speed",
        "exchange_coefficient",
        "silicate_conc",
        "atmospheric_pco2",
        "stop_time",
    )

    def __init__(self):
        raise NotImplementedError("InputParsing has no instance!")

    def __initialize_keyword_variables__(self, kwargs) -> None:
        """Check, register and update keyword variables.

        Parameters
        ----------
        kwargs : dict
            Dictionary of keyword arguments to process
        """
        self.update = False
        self.__check_mandatory_keywords__(self.lrk, kwargs)
        self.__register_variable_names__(self.defaults, kwargs)
        self.__update_dict_entries__(self.defaults, kwargs)
        self.update = True

    def __check_mandatory_keywords__(self, lrk: list, kwargs: dict) -> None:
        """Verify that all required keywords are present in kwargs.

        Parameters
        ----------
        lrk : list
            List of required keywords
        kwargs : dict
            Dictionary of provided keyword arguments

        Raises
        ------
        MissingKeywordError
            If a required keyword is missing or None
        """
        if not lrk:
            return

        if not isinstance(lrk, list):
            raise TypeError(f"Required keywords list must be a list, not {type(lrk)}")

        if not isinstance(kwargs, dict):
            raise TypeError(f"Keywords must be a dictionary, not {type(kwargs)}")

        for key in lrk:
            if key not in kwargs:
                raise MissingKeywordError(f"'{key}' is a mandatory keyword")
            elif kwargs[key] is None:
                raise MissingKeywordError(
                    f"'{key}' is a mandatory keyword and cannot be None"
                )

    def __register_variable_names__(
        self,
        defaults: dict[str, list[any, tuple]],
        kwargs: dict,
    ) -> None:
        """Register the key-value pairs as local instance variables.

        We register them with their actual variable name and as _variable_name
        to support setter and getter methods and avoid name conflicts.
        """
        for key, value in defaults.items():
            setattr(self, f"_{key}", value[0])
            setattr(self, key, value[0])

        # save kwargs dict
        self.kwargs: dict = kwargs

    def __update_dict_entries__(
        self,
        defaults: dict[str, list[any, tuple]],
        kwargs: dict[str, any],
    ) -> None:
        """Validate and update instance attributes with provided keyword arguments.

        Parameters
        ----------
        defaults : dict
            Dictionary with format {"key": [default_value, (allowed_types)]}
        kwargs : dict
            Dictionary with format {"key": value}

        Raises
        ------
        KeywordError
            If a key in kwargs is not in defaults
        InputError
            If a value in kwargs is not of the expected type or fails validation
        ValueError
            If defaults dictionary is empty
        """
        if not defaults:
            raise ValueError("Defaults dictionary cannot be empty")

        if not kwargs:
            return  # Nothing to update

        for key, value in kwargs.items():
            self.__process_keyword__(defaults, key, value)

    def __process_keyword__(self, defaults, key, value):
        """Process a single keyword argument.

        Raises
        ------
        KeywordError
            If key is not in defaults
        InputError
            If value is not of the expected type or fails validation
        """
        if key not in defaults:
            raise KeywordError(f"'{key}' is not a valid keyword")

        # None keeps the default
        if value is None:
            return

        expected_types = defaults[key][1]
        self.__validate_value_type__(key, value, expected_types)

        try:
            self._validate_value(key, value, expected_types)
        except ValueError as err:
            raise InputError(f"Validation failed for '{key}': {str(err)}") from err

        self.__update_attribute_values__(defaults, key, value)

    def __validate_value_type__(self, key, value, expected_types):
        """Validate that a value is of the expected type.

        Raises
        ------
        InputError
            If value is not of the expected type
        """
        # bool is an int, but never a valid number here
        is_bool = isinstance(value, bool) and bool not in _as_tuple(expected_types)
        if is_bool or not isinstance(value, expected_types):
            actual_type = type(value).__name__
            expected_types_str = ", ".join(
                t.__name__ for t in _as_tuple(expected_types)
            )
            raise InputError(
                f"'{value}' for '{key}' must be of type {expected_types_str}, "
                f"not {actual_type}"
            )

    def __update_attribute_values__(self, defaults, key, value):
        """Update the attribute values in both defaults dictionary and instance."""
        defaults[key][0] = value  # update defaults dictionary
        setattr(self, key, value)  # update instance variables
        setattr(self, f"_{key}", value)

    def _validate_value(self, key, value, expected_types):
        """Perform additional validation on values based on their types.

        Raises
        ------
        ValueError
            If the value fails validation
        """
        if isinstance(value, str):
            if key == "name" and (not value or value.isspace()):
                raise ValueError("Name cannot be empty or just whitespace")

        elif isinstance(value, int | float) and not isinstance(value, bool):
            if key in self.positive_keys and value <= 0:
                raise ValueError(f"'{key}' must be positive, got {value}")

            if key in self.non_negative_keys and value < 0:
                raise ValueError(f"'{key}' must not be negative, got {value}")

            if key == "initial_ph_guess" and (value < 0 or value > 14):
                raise ValueError(f"pH must be between 0 and 14, got {value}")


def _as_tuple(types) -> tuple:
    return types if isinstance(types, tuple) else (types,)


class co2fluxBase(InputParsing):
    """The co2flux base class template.

    This class handles keyword arguments, name registration and
    other common tasks.

    Examples
    --------
    .. code-block:: python

            # Define required keywords in lrk list
            self.lrk: list = ["model"]

            # Define allowed type per keyword in defaults dict
            self.defaults: dict[str, list[any, tuple]] = {
                "name": ["None", (str)],
                "model": ["None", (str, ColumnModel)],
                "salinity": [35, (int, float)],  # int or float
            }

            # Parse and register all keywords with the instance
            self.__initialize_keyword_variables__(kwargs)

            # Register the instance
            self.__register_name__()
    """

    def __init__(self) -> None:
        raise NotImplementedError

    def __register_name__(self) -> None:
        """Set full_name and remember the registration time."""
        parent = getattr(self, "parent", "None")
        if parent == "None" or parent is None:
            self.full_name = self.name
        else:
            self.full_name = f"{parent.full_name}.{self.name}"
        self.reg_time = time.monotonic()

    def __repr__(self, log=0) -> str:
        """Return string representation of the object.

        Parameters
        ----------
        log : int, default=0
            If 0 and object was just created (<1 second ago),
            returns empty string to suppress output
        """
        from co2flux import Q_

        tdiff = time.monotonic() - getattr(self, "reg_time", 0)

        m = f"{self.__class__.__name__}(\n"
        for k, v in self.kwargs.items():
            if isinstance(v, co2fluxBase):
                m = f"{m}    {k} = {v.name},\n"
            elif isinstance(v, str | Q_):
                m = f"{m}    {k} = '{v}',\n"
            elif isinstance(v, list | np.ndarray):
                m = f"{m}    {k} = '{v[:3]}',\n"
            else:
                m = f"{m}    {k} = {v},\n"

        m = "" if log == 0 and tdiff < 1 else f"{m})"
        return m

    def __str__(self, kwargs=None):
        """Return a string representation of the object with its key attributes.

        Parameters
        ----------
        kwargs : dict, optional
            - indent : int
                Number of spaces to indent output
        """
        if kwargs is None:
            kwargs = {}
        from co2flux import Q_

        off: str = "  "
        ind: str = kwargs["indent"] * " " if "indent" in kwargs else ""
        m = f"{ind}{self.name} ({self.__class__.__name__})\n"
        for k in self.defaults:
            if k == "name":
                continue
            v = getattr(self, k)
            if isinstance(v, co2fluxBase):
                m = f"{m}{ind}{off}{k} = {v.name}\n"
            elif isinstance(v, str | Q_ | int | float):
                m = f"{m}{ind}{off}{k} = {v}\n"

        return m

    def info(self, **kwargs) -> None:
        """Show an overview of the object properties.

        Optional keywords: ``indent`` (int), number of spaces for indentation
        """
        indent = kwargs.get("indent", 0)
        ind = " " * indent

        print(f"{ind}{self.__str__(kwargs)}")

    def help(self) -> None:
        """Show all keywords, their default values and allowed types."""
        print(f"\n{self.full_name} has the following keywords:\n")
        for k, v in self.defaults.items():
            print(f"{k} defaults to {v[0]}, allowed types = {v[1]}")
        print()
        print("The following keywords are mandatory:")
        for kw in self.lrk:
            print(f"{kw}")

