"""
Notebook references: handles for reading variables and calling functions of a
notebook running on a remote server.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from notebook_rpc.client import NotebookClient, default_client
from notebook_rpc.resolver import Resolved, resolve_property


@dataclass(frozen=True)
class NotebookReference:
    """
    Reference a notebook running on a server somewhere.

    Attribute access reads a variable, or returns a CallableReference when the
    name is a function. Calling the reference binds input variables.

    Example:
        >>> nb = NotebookReference("EuclideanDistance.jl")
        >>> nb.c
        5.0
        >>> nb(a=5.0, b=12.0).c
        13.0
        >>> nb.distance(5.0, 12.0)
        13.0

    References built without a client share one default client configured
    from the environment; pass a client from ``NotebookClient(...).notebook()``
    to control its lifetime.

    Variables whose names clash with attributes of this class (``host``,
    ``resolve``, ...) or start with an underscore are read with
    ``resolve(name)`` or ``nb[name]`` instead.
    """

    identifier: str
    host: Optional[str] = None
    client: Optional[NotebookClient] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.client is None:
            object.__setattr__(self, "client", default_client())
        if self.host is None:
            object.__setattr__(self, "host", self.client.settings.host)

    def __call__(self, /, **bindings) -> "BoundParameters":
        """Bind input variables; no request is made until an output is read."""
        return BoundParameters(self, bindings)

    def resolve(self, name: str) -> Resolved:
        """Read ``name`` with no inputs bound."""
        return self().resolve(name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.resolve(name).unwrap()

    def __getitem__(self, names) -> dict[str, Any]:
        return self()[names]

    def __repr__(self) -> str:
        return f"NotebookReference({self.host!r}, {self.identifier!r})"


@dataclass(frozen=True)
class BoundParameters:
    """
    A notebook with input variables bound, waiting for an output to be read.

    Prefer binding and reading in one expression, ``nb(a=5.0, b=12.0).c``,
    over keeping this object around.
    """

    notebook: NotebookReference
    bindings: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "bindings", MappingProxyType(dict(self.bindings)))

    def _evaluate(self, output: str) -> Any:
        nb = self.notebook
        return nb.client.evaluate(output, nb.identifier, self.bindings, host=nb.host)

    def resolve(self, name: str) -> Resolved:
        """
        Evaluate ``name`` with the bound inputs.

        Returns:
            ResolvedValue with the variable's value, or ResolvedCallable when
            ``name`` is a function in the notebook
        """
        return resolve_property(self.notebook, name, self._evaluate)

    def outputs(self, *names: str) -> dict[str, Any]:
        """
        Read several outputs with the same inputs.

        One evaluate request is made per name. Repeated names are requested once. Function names are not
        turned into callables here; their errors propagate.

        Returns:
            Mapping of each name to its value, in the order requested
        """
        # TODO: request every name in one /eval call once the server returns all requested outputs
        return {name: self._evaluate(name) for name in dict.fromkeys(names)}

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.resolve(name).unwrap()

    def __getitem__(self, names: Union[str, tuple, list]) -> dict[str, Any]:
        if isinstance(names, str):
            names = (names,)
        return self.outputs(*names)

    def __hash__(self) -> int:
        return hash((self.notebook, frozenset(self.bindings.items())))

    def __repr__(self) -> str:
        return f"BoundParameters({self.notebook!r}, {dict(self.bindings)!r})"


@dataclass(frozen=True)
class CallableReference:
    """
    Reference to a function defined in a notebook.

    Calling it sends the arguments to the server and returns what the
    function returned there.

    Example:
        >>> nb.distance
        CallableReference(NotebookReference('http://localhost:1234', 'EuclideanDistance.jl'), 'distance')
        >>> nb.distance(5.0, 12.0)
        13.0
    """

    notebook: NotebookReference
    name: str

    def __call__(self, /, *args, **kwargs) -> Any:
        nb = self.notebook
        return nb.client.call(self.name, args, kwargs, nb.identifier, host=nb.host)

    def __repr__(self) -> str:
        return f"CallableReference({self.notebook!r}, {self.name!r})"
