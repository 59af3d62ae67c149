"""Optional request parameters and the generic request base class.

Every operation has its own ``*Request`` class.  Each of them accepts a closed
set of optional parameters, declared once as the type argument of
:class:`GenericRequest`::

    class FooRequest(GenericRequest[UserProject | Projection]):
        ...

The declaration is read when ``FooRequest`` is defined.  Static type checkers
reject calls like ``FooRequest(...).set_parameter(Prefix("a"))`` and the same
call fails at runtime with :class:`UndeclaredParameterError`.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar, get_args, get_origin

from .exceptions import UndeclaredParameterError

T = TypeVar("T")


@dataclass(frozen=True)
class RequestParameter(Generic[T]):
    """A named optional value that is either present or absent."""

    value: T | None = None

    # Stable name used on the wire and in debug dumps
    name: ClassVar[str] = ""

    @property
    def has_value(self) -> bool:
        return self.value is not None

    def add_to(self, query: dict[str, str]) -> None:
        """Write this parameter into *query* if it has a value."""
        if self.has_value:
            query[self.name] = str(self.value)

    def __str__(self) -> str:
        return f"{self.name}={self.value}"


class Generation(RequestParameter[int]):
    """Select a specific revision of an object."""

    name = "generation"


class IfGenerationMatch(RequestParameter[int]):
    name = "ifGenerationMatch"


class IfGenerationNotMatch(RequestParameter[int]):
    name = "ifGenerationNotMatch"


class IfMetagenerationMatch(RequestParameter[int]):
    name = "ifMetagenerationMatch"


class IfMetagenerationNotMatch(RequestParameter[int]):
    name = "ifMetagenerationNotMatch"


class MaxResults(RequestParameter[int]):
    """Limit the number of items returned per page."""

    name = "maxResults"


class Prefix(RequestParameter[str]):
    """Restrict listings to names starting with this prefix."""

    name = "prefix"


class Projection(RequestParameter[str]):
    """Control which metadata fields are returned."""

    name = "projection"

    @classmethod
    def full(cls) -> Projection:
        return cls("full")

    @classmethod
    def no_acl(cls) -> Projection:
        return cls("noAcl")


class UserProject(RequestParameter[str]):
    """Project billed for requester-pays buckets."""

    name = "userProject"


P = TypeVar("P", bound=RequestParameter[Any])
_R = TypeVar("_R", bound="GenericRequest[Any]")


def _declared_kinds(owner: str, declaration: Any) -> tuple[type[RequestParameter[Any]], ...]:
    """Validate a parameter allow-list declaration and return it as a tuple."""
    kinds = get_args(declaration) or (declaration,)
    seen: list[type[RequestParameter[Any]]] = []
    for kind in kinds:
        if not (isinstance(kind, type) and issubclass(kind, RequestParameter)):
            raise TypeError(f"{owner} declares {kind!r}, which is not a RequestParameter type")
        if kind in seen:
            raise TypeError(f"{owner} declares {kind.__name__} more than once")
        seen.append(kind)
    return tuple(seen)


class GenericRequest(Generic[P]):
    """Common handling of the optional parameters of a request.

    Parameters are stored by kind, so setting the same kind twice keeps the
    last value.  Setting a parameter whose value is ``None`` clears it.
    """

    parameter_kinds: ClassVar[tuple[type[RequestParameter[Any]], ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for base in cls.__dict__.get("__orig_bases__", ()):
            if get_origin(base) is not GenericRequest:
                continue
            (declaration,) = get_args(base)
            if isinstance(declaration, TypeVar):
                continue
            cls.parameter_kinds = _declared_kinds(cls.__name__, declaration)

    def __init__(self, *parameters: P) -> None:
        self._parameters: dict[type[RequestParameter[Any]], RequestParameter[Any]] = {}
        self.set_multiple_parameters(*parameters)

    def _check_kind(self, parameter: object) -> type[RequestParameter[Any]]:
        kind = type(parameter)
        if kind not in self.parameter_kinds:
            raise UndeclaredParameterError(type(self).__name__, parameter)
        return kind

    def set_parameter(self: _R, parameter: P) -> _R:
        """Set a single optional parameter.

        Parameters
        ----------
        parameter : RequestParameter
            One of the kinds declared by this request type.

        Returns
        -------
        GenericRequest
            ``self``, to allow chaining.

        Raises
        ------
        UndeclaredParameterError
            If the parameter kind is not declared by this request type.
        """
        kind = self._check_kind(parameter)
        if parameter.has_value:
            self._parameters[kind] = parameter
        else:
            self._parameters.pop(kind, None)
        return self

    def set_multiple_parameters(self: _R, *parameters: P) -> _R:
        """Apply :meth:`set_parameter` to each argument, in order."""
        for parameter in parameters:
            self.set_parameter(parameter)
        return self

    def get_parameter(self, kind: type[RequestParameter[T]]) -> RequestParameter[T]:
        """Return the parameter of *kind*, or an empty one when it is not set."""
        if kind not in self.parameter_kinds:
            raise UndeclaredParameterError(type(self).__name__, kind())
        return self._parameters.get(kind) or kind()

    def iter_parameters(self) -> Iterator[RequestParameter[Any]]:
        """Iterate over the parameters that are set, in declaration order."""
        for kind in self.parameter_kinds:
            parameter = self._parameters.get(kind)
            if parameter is not None:
                yield parameter

    def dump_parameters(self, sep: str = "") -> str:
        """Render the set parameters as ``name=value`` pairs.

        Parameters
        ----------
        sep : str
            Prefix emitted before the first pair; nothing is emitted when no
            parameter is set.

        Returns
        -------
        str
        """
        pairs = [str(parameter) for parameter in self.iter_parameters()]
        if not pairs:
            return ""
        return sep + ", ".join(pairs)

    def query_parameters(self) -> dict[str, str]:
        """Return the wire encoding of the set parameters."""
        query: dict[str, str] = {}
        for parameter in self.iter_parameters():
            parameter.add_to(query)
        return query
