###############################################################################
# Copyright (C) 2023 Oliver Michael Kamperis
# Email: olliekampo@gmail.com
#
# This program is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License as published by the Free Software
# Foundation, either version 3 of the License, or any later version.
#
# This program is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
# FOR A PARTICULAR PURPOSE. See the GNU General Public License for details.
#
# You should have received a copy of the GNU General Public License along with
# this program. If not, see <https://www.gnu.org/licenses/>.

"""Module for all equivalence forest related errors."""

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "EquivalenceForestError",
    "UnsupportedOperationError"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


class EquivalenceForestError(Exception):
    """Base class for all errors raised by equivalence forests."""
    pass


class UnsupportedOperationError(EquivalenceForestError, TypeError):
    """
    Raised when an operation that an equivalence forest deliberately does not
    support is called.

    Equivalence classes can only grow and merge, so any operation that would
    remove elements from the forest raises this error, regardless of the
    state of the forest, and without modifying it.
    """

    def __init__(self, operation: str, /) -> None:
        """Create a new unsupported operation error for the named operation."""
        super().__init__(
            f"Equivalence forests do not support '{operation}'; "
            "elements cannot be removed from an equivalence class."
        )
        self.operation: str = operation
