"""Code writers for generated Python sources.

``PythonWriter`` emits importable modules; ``StubWriter`` emits the same
declarations as a ``.pyi`` stub (annotations only, no values or docstrings).
Serializers only talk to the ``CodeWriter`` interface, so one serializer
serves both dialects.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Set, TextIO, Tuple


class ImportSet:
    """Collects ``import x`` and ``from x import y`` statements."""

    def __init__(self) -> None:
        self._modules: Set[str] = set()
        self._names: Dict[str, Set[str]] = {}

    def add(self, module: str, name: Optional[str] = None) -> "ImportSet":
        if module == "builtins":
            return self
        if name is None:
            self._modules.add(module)
        else:
            self._names.setdefault(module, set()).add(name)
        return self

    def add_type(self, runtime_type: type) -> str:
        """Import a runtime type and return the expression naming it."""
        module = runtime_type.__module__
        qualname = runtime_type.__qualname__
        if module != "builtins":
            self.add(module, qualname.split(".")[0])
        return qualname

    def lines(self) -> List[str]:
        """Import statements, standard library style: plain imports first, sorted."""
        statements = [f"import {module}" for module in sorted(self._modules)]
        for module in sorted(self._names):
            names = ", ".join(sorted(self._names[module]))
            statements.append(f"from {module} import {names}")
        return statements

    def __bool__(self) -> bool:
        return bool(self._modules or self._names)


class CodeWriter(ABC):
    """Indentation-aware writer for Python source text."""

    extension = ".py"

    def __init__(self, out: TextIO, indent: str = "    ") -> None:
        self.out = out
        self.indent_unit = indent
        self._level = 0
        self._class_bodies: List[int] = []

    def line(self, text: str = "") -> "CodeWriter":
        if text:
            self.out.write(f"{self.indent_unit * self._level}{text}\n")
        else:
            self.out.write("\n")
        if text and self._class_bodies:
            self._class_bodies[-1] += 1
        return self

    def nl(self) -> "CodeWriter":
        return self.line()

    def comment(self, text: str) -> "CodeWriter":
        return self.line(f"# {text}")

    def imports(self, imports: ImportSet) -> "CodeWriter":
        for statement in imports.lines():
            self.line(statement)
        return self

    def begin_class(self, name: str, bases: Iterable[str] = (), decorators: Iterable[str] = ()) -> "CodeWriter":
        for decorator in decorators:
            self.line(f"@{decorator}")
        bases = list(bases)
        header = f"class {name}({', '.join(bases)}):" if bases else f"class {name}:"
        self.line(header)
        self._level += 1
        self._class_bodies.append(0)
        return self

    def end_class(self) -> "CodeWriter":
        if self._class_bodies[-1] == 0:
            self.line(self.empty_body)
        self._class_bodies.pop()
        self._level -= 1
        return self

    @property
    @abstractmethod
    def empty_body(self) -> str:
        """Statement used for a class without members."""
        pass

    @abstractmethod
    def module_header(self, header_comment: Optional[str], docstring: Optional[str]) -> "CodeWriter":
        """Write the leading comment and module docstring."""
        pass

    @abstractmethod
    def docstring(self, text: str) -> "CodeWriter":
        pass

    @abstractmethod
    def field(self, name: str, annotation: str, value: Optional[str] = None) -> "CodeWriter":
        """Declare an attribute. Multi-line values are indented as continuation lines."""
        pass


class PythonWriter(CodeWriter):
    """Writes importable ``.py`` modules."""

    extension = ".py"

    @property
    def empty_body(self) -> str:
        return "pass"

    def module_header(self, header_comment: Optional[str], docstring: Optional[str]) -> "CodeWriter":
        if header_comment:
            self.comment(header_comment)
        if docstring:
            self.docstring(docstring)
        self.nl()
        self.line("from __future__ import annotations")
        return self.nl()

    def docstring(self, text: str) -> "CodeWriter":
        # Catalog identifiers may carry backslashes and quotes
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return self.line(f'"""{escaped}"""')

    def field(self, name: str, annotation: str, value: Optional[str] = None) -> "CodeWriter":
        if value is None:
            return self.line(f"{name}: {annotation}")
        first, *rest = value.split("\n")
        self.line(f"{name}: {annotation} = {first}")
        for continuation in rest:
            self.line(continuation)
        return self


class StubWriter(CodeWriter):
    """Writes ``.pyi`` type stubs."""

    extension = ".pyi"

    @property
    def empty_body(self) -> str:
        return "..."

    def module_header(self, header_comment: Optional[str], docstring: Optional[str]) -> "CodeWriter":
        if header_comment:
            self.comment(header_comment)
            self.nl()
        return self

    def docstring(self, text: str) -> "CodeWriter":
        return self

    def field(self, name: str, annotation: str, value: Optional[str] = None) -> "CodeWriter":
        if value is None:
            return self.line(f"{name}: {annotation}")
        return self.line(f"{name}: {annotation} = ...")


def writer_for(out: TextIO, stubs: bool = False) -> CodeWriter:
    """Create the writer of the requested dialect."""
    return StubWriter(out) if stubs else PythonWriter(out)


def tuple_literal(items: Iterable[str]) -> str:
    """Render a tuple of string literals, ``("a",)`` for one item."""
    rendered: Tuple[str, ...] = tuple(repr(item) for item in items)
    if len(rendered) == 1:
        return f"({rendered[0]},)"
    return f"({', '.join(rendered)})"
