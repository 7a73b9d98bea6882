"""
Trait and implementation extraction from Rust source.

The source text is parsed with tree-sitter's Rust grammar. Only top-level
items are considered: ``trait`` declarations contribute a trait record,
and ``impl <Trait> for <Type>`` blocks add the type to that trait's
implementors. Everything else is ignored. This is a declaration scan, not
name resolution: names are compared by their last path segment.

The result is a sum type so callers can tell "no traits found" apart from
"could not analyze":

    result = extract_interfaces(text, dependencies=["embedded-hal"])
    if isinstance(result, Parsed):
        ...
    else:
        logger.warning(result.reason)
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple, Union

import tree_sitter_rust
from tree_sitter import Language, Node, Parser

from multitarget.core.classifier import is_native_mockable
from multitarget.models.glue import InterfaceInfo

logger = logging.getLogger(__name__)

RUST_LANGUAGE = Language(tree_sitter_rust.language())

# Node types in the tree-sitter-rust grammar
TRAIT_ITEM = "trait_item"
IMPL_ITEM = "impl_item"
USE_DECLARATION = "use_declaration"

_TYPE_PREFIX = re.compile(r"^(?:&\s*)?(?:'\w+\s+)?(?:mut\s+)?(?:dyn\s+|impl\s+)?")
_LOCAL_ROOTS = {"crate", "self", "super"}


@dataclass(frozen=True)
class Parsed:
    """Source parsed cleanly; ``interfaces`` may legitimately be empty."""

    interfaces: List[InterfaceInfo] = field(default_factory=list)
    required_traits: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Unparseable:
    """Source could not be analyzed; analysis continues with no traits."""

    reason: str


ExtractionResult = Union[Parsed, Unparseable]


def simple_name(text: str) -> str:
    """
    Reduce a type or trait path to its last segment without generics.

    Examples:
        ``embedded_hal::digital::OutputPin`` -> ``OutputPin``
        ``&'a mut gpio::Pin<Output>`` -> ``Pin``
    """
    text = _TYPE_PREFIX.sub("", text.strip())
    text = text.split("<", 1)[0].strip()
    return text.split("::")[-1].strip()


def _path_parts(text: str) -> List[str]:
    text = text.split("<", 1)[0]
    return [part.strip() for part in text.strip().lstrip(":").split("::") if part.strip()]


def _node_text(node: Node) -> str:
    return node.text.decode("utf8") if node.text is not None else ""


def normalize_crate_name(name: str) -> str:
    """Crate names use '-' in manifests and '_' in paths."""
    return name.replace("-", "_")


class InterfaceExtractor:
    """Scans Rust source for top-level trait declarations and trait impls."""

    def __init__(self) -> None:
        self.parser = Parser(RUST_LANGUAGE)

    def extract(
        self,
        source: str,
        module: str = "lib",
        dependencies: Iterable[str] = (),
    ) -> ExtractionResult:
        """
        Extract trait records from ``source``.

        Args:
            source: Rust source text
            module: Module label shared by every record from this source
            dependencies: Crate names declared by the package manifest; used
                to decide which implemented traits come from dependencies

        Returns:
            Parsed with trait records in first-seen order, or Unparseable
        """
        tree = self.parser.parse(source.encode("utf8"))
        root = tree.root_node
        if root.has_error:
            logger.warning(f"Source for module '{module}' has syntax errors; skipping analysis")
            return Unparseable("source could not be parsed")

        dependency_roots = {normalize_crate_name(d) for d in dependencies}
        imports = self._collect_imports(root)

        records: Dict[str, InterfaceInfo] = {}
        required: List[str] = []

        for node in root.named_children:
            if node.type == TRAIT_ITEM:
                name_node = node.child_by_field_name("name")
                if name_node is None:
                    continue
                self._record(records, _node_text(name_node), module)
            elif node.type == IMPL_ITEM:
                trait_node = node.child_by_field_name("trait")
                type_node = node.child_by_field_name("type")
                if trait_node is None or type_node is None:
                    # inherent impl
                    continue
                trait_text = _node_text(trait_node)
                info = self._record(records, simple_name(trait_text), module)
                info.add_implementor(simple_name(_node_text(type_node)))

                crate = self._root_crate(trait_text, imports)
                if crate in dependency_roots and info.name not in required:
                    required.append(info.name)

        logger.debug(f"Extracted {len(records)} trait(s) from module '{module}'")
        return Parsed(interfaces=list(records.values()), required_traits=required)

    @staticmethod
    def _record(records: Dict[str, InterfaceInfo], name: str, module: str) -> InterfaceInfo:
        info = records.get(name)
        if info is None:
            info = InterfaceInfo(name=name, module=module, native_mock=is_native_mockable(name))
            records[name] = info
        return info

    @staticmethod
    def _root_crate(trait_text: str, imports: Dict[str, List[str]]) -> Optional[str]:
        parts = _path_parts(trait_text)
        if not parts:
            return None
        head = parts[0]
        if head in imports:
            head = imports[head][0]
        if head in _LOCAL_ROOTS:
            return None
        return head

    def _collect_imports(self, root: Node) -> Dict[str, List[str]]:
        """Map each name brought into scope by a top-level ``use`` to its full path."""
        imports: Dict[str, List[str]] = {}
        for node in root.named_children:
            if node.type != USE_DECLARATION:
                continue
            argument = node.child_by_field_name("argument")
            if argument is None:
                continue
            for local, path in self._use_paths(argument, []):
                imports[local] = path
        return imports

    def _use_paths(self, node: Node, prefix: List[str]) -> List[Tuple[str, List[str]]]:
        kind = node.type
        if kind in ("identifier", "scoped_identifier", "crate", "super", "metavariable"):
            path = prefix + _path_parts(_node_text(node))
            return [(path[-1], path)] if path else []
        if kind == "self":
            return [(prefix[-1], list(prefix))] if prefix else []
        if kind == "use_as_clause":
            path_node = node.child_by_field_name("path")
            alias_node = node.child_by_field_name("alias")
            if path_node is None or alias_node is None:
                return []
            return [(_node_text(alias_node), prefix + _path_parts(_node_text(path_node)))]
        if kind == "scoped_use_list":
            path_node = node.child_by_field_name("path")
            list_node = node.child_by_field_name("list")
            inner = prefix + (_path_parts(_node_text(path_node)) if path_node is not None else [])
            return self._use_paths(list_node, inner) if list_node is not None else []
        if kind == "use_list":
            found: List[Tuple[str, List[str]]] = []
            for child in node.named_children:
                found.extend(self._use_paths(child, prefix))
            return found
        # use_wildcard brings unknown names into scope
        return []


_default_extractor: Optional[InterfaceExtractor] = None


def extract_interfaces(
    source: str,
    module: str = "lib",
    dependencies: Iterable[str] = (),
) -> ExtractionResult:
    """Extract trait records using a shared extractor instance."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = InterfaceExtractor()
    return _default_extractor.extract(source, module=module, dependencies=dependencies)
