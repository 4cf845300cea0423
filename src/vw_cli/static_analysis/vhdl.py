"""VHDL static analysis.

Lexical extraction of design units and references from one VHDL file. This is
not a parser: each rule is an independent regular expression run over
normalized (comment-stripped, lower-cased) text.
"""

import re
from dataclasses import dataclass, field

from vw_cli.errors import MalformedSourceError

WORK = "work"

ENTITY = "entity"
PACKAGE = "package"
CONTEXT = "context"

# Libraries shipped with every simulator, never part of a workspace
STANDARD_LIBRARIES = frozenset({"ieee", "std"})

DEFAULT_TESTBENCH_SUFFIX = "_tb"

# Strings, character literals and comments, earliest match wins
_LEXICAL_RE = re.compile(
    r'"(?:[^"\n]|"")*"'
    r"|'[^\n]'"
    r"|--[^\n]*"
    r"|/\*.*?(?:\*/|\Z)",
    re.DOTALL,
)

_USE_RE = re.compile(r"\buse\s+([^;]+);")
_USE_ITEM_RE = re.compile(r"^(\w+)\s*\.\s*(\w+)")
_USE_ENTITY_RE = re.compile(r"^entity\s+(\w+)\s*\.\s*(\w+)")
_CONTEXT_DECL_RE = re.compile(r"\bcontext\s+(\w+)\s+is\b")
_CONTEXT_REF_RE = re.compile(r"\bcontext\s+(\w+\s*\.\s*\w+(?:\s*,\s*\w+\s*\.\s*\w+)*)\s*;")
_ENTITY_DECL_RE = re.compile(r"\bentity\s+(\w+)\s+is\b")
_ARCHITECTURE_RE = re.compile(r"\barchitecture\s+\w+\s+of\s+(\w+)\s+is\b")
_PACKAGE_DECL_RE = re.compile(
    r"\bpackage\s+(?!body\b)(\w+)\s+is\b(?:\s+new\s+(\w+)\s*\.\s*(\w+))?"
)
_PACKAGE_BODY_RE = re.compile(r"\bpackage\s+body\s+(\w+)\s+is\b")
_ENTITY_INST_RE = re.compile(r"\b\w+\s*:\s*entity\s+(\w+)\s*\.\s*(\w+)")
_COMPONENT_RE = re.compile(r"\bcomponent\s+(\w+)")
_COMPONENT_INST_RE = re.compile(r"\b\w+\s*:\s*component\s+(\w+)")
_LABELLED_RE = re.compile(r"\b\w+\s*:\s*(\w+)\b(\s*(?:generic|port)\s+map\b)?")

# Words that can follow "<label> :" without being an instantiation
_LABEL_KEYWORDS = frozenset(
    {
        "entity", "component", "configuration", "process", "postponed", "block",
        "for", "if", "case", "assert", "with", "in", "out", "inout", "buffer",
        "linkage", "signal", "variable", "constant", "file", "type", "loop", "while",
    }
)


@dataclass(frozen=True)
class SourceFile:
    """One file as delivered by the source provider."""

    path: str
    library: str
    text: str
    is_bench: bool = False


@dataclass(frozen=True, order=True)
class Symbol:
    """A declared design unit: (kind, name)."""

    kind: str
    name: str

    def __str__(self) -> str:
        return f"{self.kind} {self.name}"


@dataclass(frozen=True)
class SourceUnit:
    """Structural summary of one parsed file."""

    path: str
    library: str
    declared_symbols: frozenset[Symbol] = field(default_factory=frozenset)
    # Primary units whose secondary units (package body, architecture) live here
    implemented_symbols: frozenset[Symbol] = field(default_factory=frozenset)
    used_packages: frozenset[tuple[str, str]] = field(default_factory=frozenset)
    used_contexts: frozenset[tuple[str, str]] = field(default_factory=frozenset)
    direct_instantiations: frozenset[tuple[str, str]] = field(default_factory=frozenset)
    component_declarations: frozenset[str] = field(default_factory=frozenset)
    component_instantiations: frozenset[str] = field(default_factory=frozenset)
    # "<label> : <name> port map" with no local component declaration: either
    # a component declared in some package or a vendor primitive
    inferred_instantiations: frozenset[str] = field(default_factory=frozenset)
    is_testbench_candidate: bool = False

    @property
    def entities(self) -> list[str]:
        return sorted(s.name for s in self.declared_symbols if s.kind == ENTITY)

    @property
    def testbench_name(self) -> str | None:
        """Name of the testbench entity, for testbench candidates only."""
        if not self.is_testbench_candidate:
            return None
        return self.entities[0]

    @property
    def sort_key(self) -> tuple[str, str]:
        return (self.library, self.path)


def normalize(text: str, path: str = "<text>") -> str:
    """Blank out literals and comments, then case-fold.

    Raises:
        MalformedSourceError: Binary content or an unterminated block comment.
    """
    if "\x00" in text:
        raise MalformedSourceError(path, "file contains NUL bytes (binary content?)")

    def _blank(match: re.Match) -> str:
        token = match.group(0)
        if token.startswith('"'):
            return '""'
        if token.startswith("'"):
            return "' '"
        if token.startswith("/*") and not token.endswith("*/"):
            raise MalformedSourceError(path, "unterminated block comment")
        return " "

    return _LEXICAL_RE.sub(_blank, text).lower()


class VhdlAnalyzer:
    """Analyzer for VHDL files: declarations, use clauses and instantiations."""

    def __init__(
        self,
        testbench_suffix: str = DEFAULT_TESTBENCH_SUFFIX,
        ignored_libraries: frozenset[str] | set[str] = frozenset(),
    ) -> None:
        """Initialize VhdlAnalyzer.

        Args:
            testbench_suffix: Entity name suffix that marks a testbench.
            ignored_libraries: Extra vendor libraries to treat like ieee/std.
        """
        self.testbench_suffix = testbench_suffix.lower()
        self.ignored_libraries = STANDARD_LIBRARIES | {lib.lower() for lib in ignored_libraries}

    def analyze(self, source: SourceFile) -> SourceUnit:
        """Extract the structural summary of one source file.

        Args:
            source: The file path, owning library and text.

        Returns:
            SourceUnit for the file.

        Raises:
            MalformedSourceError: If the text cannot be scanned at all.
        """
        text = normalize(source.text, source.path)
        library = source.library.lower()

        declared: set[Symbol] = set()
        used_packages: set[tuple[str, str]] = set()
        direct: set[tuple[str, str]] = set()

        for match in _ENTITY_DECL_RE.finditer(text):
            declared.add(Symbol(ENTITY, match.group(1)))

        for match in _PACKAGE_DECL_RE.finditer(text):
            declared.add(Symbol(PACKAGE, match.group(1)))
            # package <name> is new <lib>.<pkg>
            if match.group(2):
                self._add_ref(used_packages, match.group(2), match.group(3), library)

        for match in _CONTEXT_DECL_RE.finditer(text):
            declared.add(Symbol(CONTEXT, match.group(1)))

        implemented = {Symbol(PACKAGE, m.group(1)) for m in _PACKAGE_BODY_RE.finditer(text)}
        implemented |= {Symbol(ENTITY, m.group(1)) for m in _ARCHITECTURE_RE.finditer(text)}
        implemented -= declared

        for match in _USE_RE.finditer(text):
            for item in match.group(1).split(","):
                item = item.strip()
                # Binding indication: for all : comp use entity lib.ent(arch);
                entity_match = _USE_ENTITY_RE.match(item)
                if entity_match:
                    self._add_ref(direct, entity_match.group(1), entity_match.group(2), library)
                    continue
                item_match = _USE_ITEM_RE.match(item)
                # "use work.all;" makes every unit of a library visible, naming none
                if item_match and item_match.group(2) != "all":
                    self._add_ref(used_packages, item_match.group(1), item_match.group(2), library)

        used_contexts: set[tuple[str, str]] = set()
        for match in _CONTEXT_REF_RE.finditer(text):
            for item in match.group(1).split(","):
                lib, _, name = item.partition(".")
                self._add_ref(used_contexts, lib.strip(), name.strip(), library)

        for match in _ENTITY_INST_RE.finditer(text):
            self._add_ref(direct, match.group(1), match.group(2), library)

        components = self._component_declarations(text)
        instantiated = {m.group(1) for m in _COMPONENT_INST_RE.finditer(text)}
        inferred: set[str] = set()
        for match in _LABELLED_RE.finditer(text):
            name = match.group(1)
            if name in _LABEL_KEYWORDS:
                continue
            if name in components:
                instantiated.add(name)
            elif match.group(2):
                inferred.add(name)
        inferred -= instantiated

        entities = [s for s in declared if s.kind == ENTITY]
        is_candidate = (
            source.is_bench
            and len(entities) == 1
            and entities[0].name.endswith(self.testbench_suffix)
        )

        return SourceUnit(
            path=source.path,
            library=library,
            declared_symbols=frozenset(declared),
            implemented_symbols=frozenset(implemented),
            used_packages=frozenset(used_packages),
            used_contexts=frozenset(used_contexts),
            direct_instantiations=frozenset(direct),
            component_declarations=frozenset(components),
            component_instantiations=frozenset(instantiated),
            inferred_instantiations=frozenset(inferred),
            is_testbench_candidate=is_candidate,
        )

    def _add_ref(self, refs: set[tuple[str, str]], lib: str, name: str, own_library: str) -> None:
        if lib in self.ignored_libraries:
            return
        # "work" always names the consumer's own library
        refs.add((own_library if lib == WORK else lib, name))

    @staticmethod
    def _component_declarations(text: str) -> set[str]:
        names = set()
        for match in _COMPONENT_RE.finditer(text):
            before = text[max(0, match.start() - 32) : match.start()].rstrip()
            # "end component foo;" and "u1 : component foo" are not declarations
            if before.endswith(":") or re.search(r"\bend$", before):
                continue
            names.add(match.group(1))
        return names
