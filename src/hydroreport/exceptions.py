"""Customized HydroReport exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import async_retriever.exceptions as ar

if TYPE_CHECKING:
    from collections.abc import Generator, Sequence


class ServiceError(ar.ServiceError):
    """Exception raised when a data source fails to answer a request.

    Parameters
    ----------
    err : str
        Service error message.
    url : str, optional
        The requested URL, defaults to None.
    """


class RetrievalError(Exception):
    """Exception raised when a daily time series cannot be retrieved.

    Parameters
    ----------
    site_id : str
        The requested site.
    parameter : str
        Name of the requested parameter.
    dates : tuple of str
        Start and end dates of the requested window.
    reason : str
        What went wrong.
    """

    def __init__(self, site_id: str, parameter: str, dates: tuple[str, str], reason: str) -> None:
        self.site_id = site_id
        self.parameter = parameter
        self.dates = dates
        self.message = (
            f"Failed to retrieve {parameter} for site {site_id} "
            f"from {dates[0]} to {dates[1]}:\n{reason}"
        )
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return the error message."""
        return self.message


class DataNotAvailableError(Exception):
    """Exception raised for requested data is not available.

    Parameters
    ----------
    data_name : str
        Data name requested.
    """

    def __init__(self, data_name: str) -> None:
        self.message = f"{data_name.capitalize()} is not available for the requested query."
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return the error message."""
        return self.message


class InputValueError(Exception):
    """Exception raised for invalid input.

    Parameters
    ----------
    inp : str
        Name of the input parameter
    valid_inputs : tuple
        List of valid inputs
    given : str, optional
        The given input, defaults to None.
    """

    def __init__(
        self,
        inp: str,
        valid_inputs: Sequence[str | int] | Generator[str | int, None, None],
        given: str | int | None = None,
    ) -> None:
        if given is None:
            self.message = f"Given {inp} is invalid. Valid options are:\n"
        else:
            self.message = f"Given {inp} ({given}) is invalid. Valid options are:\n"
        self.message += "\n".join(str(i) for i in valid_inputs)
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return the error message."""
        return self.message


class InvalidParameterError(InputValueError):
    """Exception raised when a parameter or statistic code is not supported.

    Parameters
    ----------
    inp : str
        Name of the input, e.g., ``parameter_code``.
    valid_inputs : tuple
        Supported codes.
    given : str, optional
        The given code, defaults to None.
    """


class InputRangeError(Exception):
    """Exception raised when a function argument is not in the valid range.

    Parameters
    ----------
    variable : str
        Name of the variable.
    valid_range : str
        Description of the valid range.
    """

    def __init__(self, variable: str, valid_range: str) -> None:
        self.message = f"Valid range for {variable} is {valid_range}."
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return the error message."""
        return self.message


class InputTypeError(Exception):
    """Exception raised when a function argument type is invalid.

    Parameters
    ----------
    arg : str
        Name of the function argument
    valid_type : str
        The valid type of the argument
    example : str, optional
        An example of a valid form of the argument, defaults to None.
    """

    def __init__(self, arg: str, valid_type: str, example: str | None = None) -> None:
        self.message = f"The {arg} argument should be of type {valid_type}"
        if example is not None:
            self.message += f":\n{example}"
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return the error message."""
        return self.message


class DependencyError(Exception):
    """Exception raised when a dependencies are not met.

    Parameters
    ----------
    libraries : tuple
        List of valid inputs
    """

    def __init__(self, func: str, libraries: str | list[str] | Generator[str, None, None]) -> None:
        libraries = [libraries] if isinstance(libraries, str) else libraries
        self.message = f"The following dependencies are missing for running {func}:\n"
        self.message += ", ".join(libraries)
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return the error message."""
        return self.message
