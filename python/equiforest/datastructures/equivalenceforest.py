###########################################################################
###########################################################################
## An equivalence forest, a union-find mutable set of elements.          ##
##                                                                       ##
## Copyright (C)  2022  Oliver Michael Kamperis                          ##
## Email: o.m.kamperis@gmail.com                                         ##
##                                                                       ##
## This program is free software: you can redistribute it and/or modify  ##
## it under the terms of the GNU General Public License as published by  ##
## the Free Software Foundation, either version 3 of the License, or     ##
## any later version.                                                    ##
##                                                                       ##
## This program is distributed in the hope that it will be useful,       ##
## but WITHOUT ANY WARRANTY; without even the implied warranty of        ##
## MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the          ##
## GNU General Public License for more details.                          ##
##                                                                       ##
## You should have received a copy of the GNU General Public License     ##
## along with this program. If not, see <https://www.gnu.org/licenses/>. ##
###########################################################################
###########################################################################

"""Module containing an equivalence forest, a union-find mutable set."""

import collections.abc
import logging
from typing import (Callable, Final, Generic, Hashable, Iterable, Iterator,
                    NamedTuple, Optional, TypeVar, overload)

from typing_extensions import override

from equiforest.datastructures.forest_errors import UnsupportedOperationError

__copyright__ = "Copyright (C) 2022 Oliver Michael Kamperis"
__license__ = "GPL-3.0"

__all__ = (
    "EquivalenceForest",
    "ForestNode",
    "DEFAULT_INITIAL_CAPACITY",
    "DEFAULT_LOAD_FACTOR"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


# Presets for the backing lookup table, they do not change behaviour.
DEFAULT_INITIAL_CAPACITY: Final[int] = 16
DEFAULT_LOAD_FACTOR: Final[float] = 0.75

# Marks that no elements were given to the constructor (None is an error).
_NO_ELEMENTS: Final[object] = object()


# Equivalence forest generic element type (must be hashable).
ST = TypeVar("ST", bound=Hashable)


class ForestNode(NamedTuple, Generic[ST]):
    """A snapshot of a single node of an equivalence forest."""

    value: ST
    parent: ST
    rank: int


class EquivalenceForest(collections.abc.MutableSet, Generic[ST]):
    """
    An equivalence forest, a union-find (disjoint-set) data structure that is
    also a mutable set of its elements.

    The elements of the forest are partitioned into equivalence classes.
    Every element starts in its own singleton class, and classes can only be
    merged (joined), never split. Two elements are equivalent if and only if
    they are in the same class.

    Each element is represented by a node in a forest of trees, where the
    root of each tree is the canonical representative of a class. Nodes are
    stored in an arena of parallel lists, and each node refers to its parent
    by its index in the arena, a root being its own parent. Root finding
    fully compresses the path from a node to its root, and joins attach the
    root of the lower rank tree onto the root of the higher rank tree, so
    both operations take near-constant amortised time.

    As a mutable set, the forest supports membership testing, iteration,
    cardinality, element insertion, and the comparison and algebra operators
    of `collections.abc.Set`. Set equality considers only the elements, not
    how they are partitioned, so two forests with the same elements are equal
    even if they have been joined differently. Removing elements is not
    supported, all removal operations raise `UnsupportedOperationError`.

    Root finding mutates the forest (it compresses paths), so equivalence
    queries need the same exclusive access as joins if a forest is shared
    between threads.

    Example Usage
    -------------
    ```
    from equiforest.datastructures.equivalenceforest import EquivalenceForest

    # Construct a forest with integer elements from an iterable,
    # it is initially fully-disjoint, such that no two elements
    # are in the same equivalence class.
    >>> forest: EquivalenceForest[int] = EquivalenceForest(range(4))
    >>> forest
    EquivalenceForest([{0}, {1}, {2}, {3}])

    # Joining elements merges their equivalence classes,
    # and equivalence is transitive.
    >>> forest.join(0, 1)
    True
    >>> forest.join(1, 2)
    True
    >>> forest.are_equivalent(0, 2)
    True
    >>> forest.are_equivalent(0, 3)
    False
    >>> forest.equivalence_class(1)
    frozenset({0, 1, 2})
    >>> str(forest)
    'Equivalence-Forest: total elements = 4, total equivalence classes = 2'

    # Joining elements that are not in the forest adds them.
    >>> forest.join(5, 6)
    True
    >>> len(forest)
    6
    ```
    """

    __FOREST_LOGGER = logging.getLogger("EquivalenceForest")

    __slots__ = {
        "__index_of": "Maps each element to the index of its node.",
        "__elements": "The element of each node, by node index.",
        "__parent_of": "The index of the parent of each node, by node index.",
        "__rank_of": "The rank of each node, by node index.",
        "__initial_capacity": "The initial capacity preset.",
        "__load_factor": "The load factor preset.",
        "__debug": "Whether to log debug messages."
    }

    __hash__ = None  # type: ignore[assignment]

    @overload
    def __init__(
        self, *,
        initial_capacity: int = DEFAULT_INITIAL_CAPACITY,
        load_factor: float = DEFAULT_LOAD_FACTOR,
        debug: bool = False
    ) -> None:
        """Create an empty equivalence forest."""
        ...

    @overload
    def __init__(
        self,
        elements: Iterable[ST], /,
        initial_capacity: int = DEFAULT_INITIAL_CAPACITY,
        load_factor: float = DEFAULT_LOAD_FACTOR, *,
        debug: bool = False
    ) -> None:
        """
        Create a new equivalence forest from an iterable of elements, each in
        its own singleton equivalence class.

        Duplicate elements are only added once.
        """
        ...

    def __init__(
        self,
        elements: Iterable[ST] | object = _NO_ELEMENTS, /,
        initial_capacity: int = DEFAULT_INITIAL_CAPACITY,
        load_factor: float = DEFAULT_LOAD_FACTOR, *,
        debug: bool = False
    ) -> None:
        """
        Create a new equivalence forest.

        Parameters
        ----------
        `elements: Iterable[ST@EquivalenceForest]` - The initial elements of
        the forest, each in its own singleton equivalence class. If not given,
        the forest is initially empty.

        `initial_capacity: int = DEFAULT_INITIAL_CAPACITY` - Initial capacity
        hint for the backing lookup table.

        `load_factor: float = DEFAULT_LOAD_FACTOR` - Load factor hint for the
        backing lookup table.

        `debug: bool = False` - Whether to log debug messages.

        Raises
        ------
        `ValueError` - If the initial capacity is negative, or the load factor
        is not positive.

        `TypeError` - If the elements are given as None, or the initial
        capacity is not an int.
        """
        if (not isinstance(initial_capacity, int)
                or isinstance(initial_capacity, bool)):
            raise TypeError("Initial capacity must be an int. "
                            f"Got; {initial_capacity!r} of "
                            f"{type(initial_capacity)!r}.")
        if initial_capacity < 0:
            raise ValueError("Initial capacity must be non-negative. "
                             f"Got; {initial_capacity!r}.")
        if not load_factor > 0.0:
            raise ValueError("Load factor must be positive. "
                             f"Got; {load_factor!r}.")
        if elements is None:
            raise TypeError("Cannot create an equivalence forest from None, "
                            "omit the elements to create an empty forest.")

        self.__initial_capacity: int = initial_capacity
        self.__load_factor: float = load_factor
        self.__debug: bool = debug
        if self.__debug:
            self.__FOREST_LOGGER.debug(
                "Creating new equivalence forest with: "
                "initial_capacity=%s, load_factor=%s, debug=%s",
                initial_capacity, load_factor, debug
            )

        self.__index_of: dict[ST, int] = {}
        self.__elements: list[ST] = []
        self.__parent_of: list[int] = []
        self.__rank_of: list[int] = []

        if elements is not _NO_ELEMENTS:
            for element in elements:  # type: ignore
                if element not in self.__index_of:
                    self.__new_node(element)

    @classmethod
    def from_classes(
        cls,
        classes: Iterable[Iterable[ST]], /, *,
        debug: bool = False
    ) -> "EquivalenceForest[ST]":
        """
        Create a new equivalence forest from an iterable of equivalence
        classes.

        The elements of each class are joined together. If an element appears
        in more than one class, those classes are merged. Empty classes are
        ignored.

        For example:
        ```
        >>> forest = EquivalenceForest.from_classes([{0, 1, 2}, {3}])
        >>> forest.are_equivalent(0, 2)
        True
        ```
        """
        forest: EquivalenceForest[ST] = cls(debug=debug)
        for class_ in classes:
            members: list[ST] = list(class_)
            if members:
                forest.join_many(members)
        return forest

    def __str__(self) -> str:
        """
        Return string summary representation describing the number of elements
        and equivalence classes.
        """
        return (f"Equivalence-Forest: total elements = {len(self)}, "
                f"total equivalence classes = {self.class_count}")

    def __repr__(self) -> str:
        """
        Return a string representation of the forest, derived from its
        current equivalence classes.
        """
        classes = [set(class_) for class_ in self.equivalence_classes()]
        return f"{self.__class__.__name__}({classes!r})"

    @override
    def __contains__(self, element: object) -> bool:
        """Whether an element is in the forest."""
        return element in self.__index_of

    @override
    def __iter__(self) -> Iterator[ST]:
        """
        Return an iterator over all elements in insertion order.

        Adding an element to the forest invalidates the iterator, the next
        step of which raises `RuntimeError`. Joining elements that are already
        in the forest does not.
        """
        yield from self.__index_of

    @override
    def __len__(self) -> int:
        """Get the number of elements in the forest."""
        return len(self.__index_of)

    @property
    def initial_capacity(self) -> int:
        """Get the initial capacity preset of the forest."""
        return self.__initial_capacity

    @property
    def load_factor(self) -> float:
        """Get the load factor preset of the forest."""
        return self.__load_factor

    @property
    def parents(self) -> dict[ST, ST]:
        """Get a snapshot of the element to parent element mapping."""
        elements = self.__elements
        return {
            element: elements[parent]
            for element, parent
            in zip(elements, self.__parent_of)
        }

    @property
    def ranks(self) -> dict[ST, int]:
        """Get a snapshot of the element to rank mapping."""
        return dict(zip(self.__elements, self.__rank_of))

    @property
    def class_count(self) -> int:
        """Get the number of equivalence classes in the forest."""
        find_root_index = self.__find_root_index
        return len({
            find_root_index(index)
            for index in range(len(self.__elements))
        })

    def __new_node(self, element: ST, /) -> int:
        """Add a new singleton node for the element and return its index."""
        index: int = len(self.__elements)
        self.__index_of[element] = index
        self.__elements.append(element)
        self.__parent_of.append(index)
        self.__rank_of.append(0)
        if self.__debug:
            self.__FOREST_LOGGER.debug(
                "Added element %r as a new singleton class at index %s.",
                element, index
            )
        return index

    def __index(self, element: ST, /) -> int:
        """Get the node index of an element that must be in the forest."""
        try:
            return self.__index_of[element]
        except KeyError:
            raise KeyError(f"The element {element!r} of {type(element)!r} "
                           "is not in the equivalence forest.") from None

    def __find_root_index(self, index: int, /) -> int:
        """
        Find the index of the root of the tree containing the node at the
        given index, and fully compress the path from the node to its root.
        """
        # A node is a root if its parent is itself.
        parent_of: list[int] = self.__parent_of
        root: int = index
        while (parent := parent_of[root]) != root:
            root = parent

        # Point every node on the path directly at the root.
        while (parent := parent_of[index]) != root:
            parent_of[index] = root
            index = parent

        return root

    def __union(self, index_1: int, index_2: int, /) -> bool:
        """
        Union the trees containing the nodes at the given indices by rank.

        On a rank tie, the root of the first node's tree becomes the root of
        the combined tree.
        """
        if index_1 == index_2:
            return False

        root_1: int = self.__find_root_index(index_1)
        root_2: int = self.__find_root_index(index_2)
        if root_1 == root_2:
            return False

        parent_of: list[int] = self.__parent_of
        rank_of: list[int] = self.__rank_of
        if rank_of[root_1] < rank_of[root_2]:
            parent_of[root_1] = root_2
        elif rank_of[root_1] > rank_of[root_2]:
            parent_of[root_2] = root_1
        else:
            # Equal heights, so the surviving tree grows by one.
            parent_of[root_2] = root_1
            rank_of[root_1] += 1

        if self.__debug:
            self.__FOREST_LOGGER.debug(
                "Joined the equivalence classes of %r and %r.",
                self.__elements[root_1], self.__elements[root_2]
            )
        return True

    def find_root(self, element: ST, /) -> ST:
        """
        Find the root element of the equivalence class containing the given
        element.

        The root is the canonical representative of its class, two elements
        are equivalent if and only if they have the same root. Finding the
        root fully compresses the path from the element to its root.

        Parameters
        ----------
        `element: ST@EquivalenceForest` - The element whose root to find.

        Returns
        -------
        `ST@EquivalenceForest` - The root of the class containing the given
        element.

        Raises
        ------
        `KeyError` - If the given element is not in the forest.
        """
        return self.__elements[self.__find_root_index(self.__index(element))]

    def find_path(self, element: ST, /) -> list[ST]:
        """
        Find the current path from the given element to the root element of
        its equivalence class, without compressing it.

        The list will contain only the given element if and only if the given
        element is the root of its own class.

        Raises
        ------
        `KeyError` - If the given element is not in the forest.
        """
        index: int = self.__index(element)
        parent_of: list[int] = self.__parent_of
        elements: list[ST] = self.__elements
        path: list[ST] = [element]
        while (parent := parent_of[index]) != index:
            path.append(elements[parent])
            index = parent
        return path

    def node(self, element: ST, /) -> ForestNode[ST]:
        """
        Get a snapshot of the node of the given element.

        Raises
        ------
        `KeyError` - If the given element is not in the forest.
        """
        index: int = self.__index(element)
        return ForestNode(
            self.__elements[index],
            self.__elements[self.__parent_of[index]],
            self.__rank_of[index]
        )

    @override
    def add(self, element: ST) -> bool:  # type: ignore[override]
        """
        Add an element to the forest in its own singleton equivalence class.

        Returns
        -------
        `bool` - True if the element was added, False if it was already in
        the forest (in which case the forest is unchanged).
        """
        if element in self.__index_of:
            return False
        self.__new_node(element)
        return True

    def update(self, *iterables: Iterable[ST]) -> bool:
        """
        Add all elements of the given iterables to the forest, each element
        not already in the forest being added in its own singleton class.

        Returns
        -------
        `bool` - True if any element was added.
        """
        changed: bool = False
        for iterable in iterables:
            for element in iterable:
                changed = self.add(element) or changed
        return changed

    def issuperset(self, iterable: Iterable[object], /) -> bool:
        """Whether every element of the given iterable is in the forest."""
        index_of = self.__index_of
        return all(element in index_of for element in iterable)

    def are_equivalent(
        self,
        element_1: ST,
        element_2: ST, /,
        *elements: ST
    ) -> bool:
        """
        Determine whether the given elements are in the same equivalence
        class.

        A value that is not an element of the forest is not in any
        equivalence class, so if any of the given values are not in the
        forest, this method returns False.

        If two elements are given, equivalent to:
            `self.find_root(element_1) == self.find_root(element_2)`.

        If more than two elements are given, equivalent to:
            `all(self.find_root(element_1) == self.find_root(other)
             for other in (element_2, *elements))`.
        """
        index_of = self.__index_of
        indices: list[int] = []
        for element in (element_1, element_2, *elements):
            index: int | None = index_of.get(element)
            if index is None:
                return False
            indices.append(index)

        find_root_index = self.__find_root_index
        root_1: int = find_root_index(indices[0])
        return all(
            root_1 == find_root_index(index)
            for index in indices[1:]
        )

    def join(self, element_1: ST, element_2: ST, /) -> bool:
        """
        Join the equivalence classes of the given elements.

        Elements that are not already in the forest are added. Joining an
        element with itself expresses no relation, and does not add it.

        Returns
        -------
        `bool` - True if two distinct equivalence classes were merged, False
        if the elements were already equivalent.
        """
        index_of = self.__index_of
        index_1: int | None = index_of.get(element_1)
        index_2: int | None = index_of.get(element_2)
        if index_1 is None:
            if index_2 is None and (element_1 is element_2
                                    or element_1 == element_2):
                return False
            index_1 = self.__new_node(element_1)
        if index_2 is None:
            index_2 = self.__new_node(element_2)
        return self.__union(index_1, index_2)

    def join_if_present(self, element_1: ST, element_2: ST, /) -> bool:
        """
        Join the equivalence classes of the given elements, provided that both
        are already in the forest.

        If either element is not in the forest, this method does nothing.

        Returns
        -------
        `bool` - True if two distinct equivalence classes were merged.
        """
        index_of = self.__index_of
        index_1: int | None = index_of.get(element_1)
        index_2: int | None = index_of.get(element_2)
        if index_1 is None or index_2 is None:
            return False
        return self.__union(index_1, index_2)

    def join_many(self, elements: Iterable[ST], /) -> bool:
        """
        Join all elements of the given iterable into one equivalence class.

        Elements that are not already in the forest are added.

        Returns
        -------
        `bool` - True if any distinct equivalence classes were merged.

        Raises
        ------
        `ValueError` - If the iterable is empty.
        """
        iter_: Iterator[ST] = iter(elements)
        try:
            first: ST = next(iter_)
        except StopIteration as exc:
            message: str = "Cannot join an empty iterable of elements."
            raise ValueError(message) from exc

        index_of = self.__index_of
        first_index: int | None = index_of.get(first)
        if first_index is None:
            first_index = self.__new_node(first)

        changed: bool = False
        for element in iter_:
            index: int | None = index_of.get(element)
            if index is None:
                index = self.__new_node(element)
            changed = self.__union(first_index, index) or changed
        return changed

    def equivalence_class(self, element: ST, /) -> Optional[frozenset[ST]]:
        """
        Get the equivalence class containing the given element.

        The returned set is a snapshot, it is not updated when the forest
        changes.

        Returns
        -------
        `frozenset[ST@EquivalenceForest] | None` - All elements in the same
        class as the given element (including the element itself), or None
        if the given element is not in the forest.
        """
        index: int | None = self.__index_of.get(element)
        if index is None:
            return None

        find_root_index = self.__find_root_index
        root: int = find_root_index(index)
        return frozenset(
            element_
            for index_, element_ in enumerate(self.__elements)
            if find_root_index(index_) == root
        )

    def equivalence_classes(self) -> list[frozenset[ST]]:
        """
        Get all equivalence classes of the forest.

        Every element is in exactly one of the returned sets. The sets are
        snapshots, they are not updated when the forest changes. The order of
        the classes is unspecified.
        """
        find_root_index = self.__find_root_index
        classes: dict[int, set[ST]] = {}
        for index, element in enumerate(self.__elements):
            classes.setdefault(find_root_index(index), set()).add(element)
        return [frozenset(class_) for class_ in classes.values()]

    @override
    def discard(self, element: ST) -> None:
        """Not supported, raises `UnsupportedOperationError`."""
        raise UnsupportedOperationError("discard")

    @override
    def remove(self, element: ST) -> None:
        """Not supported, raises `UnsupportedOperationError`."""
        raise UnsupportedOperationError("remove")

    @override
    def pop(self) -> ST:
        """Not supported, raises `UnsupportedOperationError`."""
        raise UnsupportedOperationError("pop")

    @override
    def clear(self) -> None:
        """Not supported, raises `UnsupportedOperationError`."""
        raise UnsupportedOperationError("clear")

    def remove_if(self, predicate: Callable[[ST], bool], /) -> bool:
        """Not supported, raises `UnsupportedOperationError`."""
        raise UnsupportedOperationError("remove_if")

    def difference_update(self, *iterables: Iterable[object]) -> None:
        """Not supported, raises `UnsupportedOperationError`."""
        raise UnsupportedOperationError("difference_update")

    def intersection_update(self, *iterables: Iterable[object]) -> None:
        """Not supported, raises `UnsupportedOperationError`."""
        raise UnsupportedOperationError("intersection_update")

    def symmetric_difference_update(self, iterable: Iterable[ST], /) -> None:
        """Not supported, raises `UnsupportedOperationError`."""
        raise UnsupportedOperationError("symmetric_difference_update")

    @override
    def __isub__(self, other: collections.abc.Set) -> "EquivalenceForest[ST]":
        raise UnsupportedOperationError("-=")

    @override
    def __iand__(self, other: collections.abc.Set) -> "EquivalenceForest[ST]":
        raise UnsupportedOperationError("&=")

    @override
    def __ixor__(self, other: collections.abc.Set) -> "EquivalenceForest[ST]":
        raise UnsupportedOperationError("^=")
