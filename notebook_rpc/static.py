"""
Static snippets: run notebook code locally instead of on the server.

The server can send the code that computes an output from a set of inputs.
``resolve_static`` fetches that code and turns it into a Python function
defined in this process. Calls to that function never touch the server, so
it only works for code that needs nothing beyond the standard library and
the inputs it is given.
"""

import ast
import logging
from typing import Any, Callable, Iterable

from notebook_rpc.errors import DecodeError

logger = logging.getLogger(__name__)


def compile_snippet(source: str, filename: str = "<notebook-static>") -> Callable[..., Any]:
    """
    Turn snippet source into a callable.

    A snippet is either a single expression evaluating to a callable
    (``lambda a, b: (a ** 2 + b ** 2) ** 0.5``) or a module whose last
    top-level function definition is the entry point.

    Args:
        source: Python source returned by the server
        filename: Name shown in tracebacks raised from the snippet

    Returns:
        The snippet's function
    """
    try:
        tree = ast.parse(source, filename=filename)
    except SyntaxError as e:
        raise DecodeError(f"Static snippet is not valid Python: {e}") from e

    namespace: dict[str, Any] = {"__name__": "notebook_static"}

    if len(tree.body) == 1 and isinstance(tree.body[0], ast.Expr):
        expression = ast.Expression(body=tree.body[0].value)
        func = eval(compile(expression, filename, "eval"), namespace)
    else:
        functions = [
            node.name for node in tree.body
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef))
        ]
        if not functions:
            raise DecodeError("Static snippet does not define a function")
        exec(compile(tree, filename, "exec"), namespace)
        func = namespace[functions[-1]]

    if not callable(func):
        raise DecodeError(f"Static snippet evaluated to {type(func).__name__}, not a function")
    return func


def resolve_static(notebook, inputs: Iterable[str], output: str) -> Callable[..., Any]:
    """
    Build a local function computing ``output`` from ``inputs``.

    Args:
        notebook: NotebookReference the code comes from
        inputs: Names of the input variables, in the order the function takes them
        output: Name of the output variable

    Returns:
        A function taking the inputs positionally and returning the output

    Example:
        >>> distance2d = resolve_static(nb, ["a", "b"], "c")
        >>> distance2d(3.0, 4.0)
        5.0
    """
    source = notebook.client.static_function(output, list(inputs), notebook.identifier, host=notebook.host)
    logger.debug("Compiling static snippet for %s from %s", output, notebook.identifier)
    return compile_snippet(source, filename=f"<{notebook.identifier}:{output}>")
