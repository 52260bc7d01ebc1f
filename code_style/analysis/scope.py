"""
Scope index and reference resolver for JavaScript/TypeScript trees.

The index is built in one depth-first walk over a SourceModel. Every
declaration creates a Binding in the scope that owns it; every
identifier use is recorded with the scope it appears in and resolved
innermost-scope-first once the walk completes, so uses of hoisted
declarations that appear earlier in the file still resolve. Names that
resolve to nothing are kept as free references and never renamed.

Shorthand sites (``{ name }`` patterns and literals, ``import { name }``,
``export { name }``) are tagged with a SiteForm because renaming them
requires expanding the syntax instead of replacing the identifier.

Type-only subtrees declare nothing; the only references inside them
are the values named by ``typeof x`` queries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from tree_sitter import Node

from .source import SourceModel, node_key

logger = logging.getLogger(__name__)


class ScopeKind(Enum):
    """Lexical region types."""

    MODULE = "module"
    FUNCTION = "function"
    BLOCK = "block"
    CATCH = "catch"
    CLASS = "class"


class BindingKind(Enum):
    """How a name was declared."""

    VARIABLE = "variable"
    PARAMETER = "parameter"
    DESTRUCTURED = "destructured"
    FUNCTION = "function"
    CLASS = "class"
    IMPORT = "import"
    ENUM = "enum"


class SiteForm(Enum):
    """Syntactic form of an identifier occurrence."""

    PLAIN = "plain"
    PATTERN_SHORTHAND = "pattern_shorthand"  # const { name } = props
    OBJECT_SHORTHAND = "object_shorthand"  # return { name }
    IMPORT_SPECIFIER = "import_specifier"  # import { name } from "x"
    EXPORT_SPECIFIER = "export_specifier"  # export { name }


# Subtrees that only describe types: no bindings, no references
TYPE_ONLY_NODES = {
    "interface_declaration",
    "type_alias_declaration",
    "type_annotation",
    "type_arguments",
    "type_parameters",
    "function_signature",
    "method_signature",
    "abstract_method_signature",
    "index_signature",
    "ambient_declaration",
    "asserts_annotation",
    "type_predicate_annotation",
    "opting_type_annotation",
    "omitting_type_annotation",
}

FUNCTION_NODES = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
}

# Wrappers between `typeof` and the value it names: typeof a.b, typeof a<T>, typeof a()
TYPE_QUERY_WRAPPERS = {
    "member_expression": "object",
    "subscript_expression": "object",
    "call_expression": "function",
    "instantiation_expression": None,
    "nested_identifier": None,
}


def _type_query_head(query: Node) -> Node | None:
    """The identifier a ``typeof`` type query resolves, if any."""
    node = query.named_children[0] if query.named_children else None
    while node is not None and node.type in TYPE_QUERY_WRAPPERS:
        field_name = TYPE_QUERY_WRAPPERS[node.type]
        if field_name is not None:
            node = node.child_by_field_name(field_name)
        else:
            node = node.named_children[0] if node.named_children else None
    if node is not None and node.type == "identifier":
        return node
    return None


@dataclass(eq=False)
class Reference:
    """One identifier occurrence, resolved to a Binding or left free."""

    node: Node
    name: str
    scope: "Scope"
    start: int
    end: int
    form: SiteForm = SiteForm.PLAIN
    is_declaration: bool = False
    binding: "Binding | None" = None

    @property
    def resolved(self) -> bool:
        return self.binding is not None

    @property
    def range(self) -> tuple[int, int]:
        return self.start, self.end


@dataclass(eq=False)
class Binding:
    """A declared name and the occurrences that resolve to it."""

    name: str
    kind: BindingKind
    scope: "Scope"
    declaration: Reference
    has_initializer: bool = False
    redeclarations: list[Reference] = field(default_factory=list)
    uses: list[Reference] = field(default_factory=list)

    @property
    def node(self) -> Node:
        return self.declaration.node

    @property
    def declaration_is_reference(self) -> bool:
        """Whether the declaration site is rewritten exactly like a use."""
        return self.has_initializer or self.kind == BindingKind.DESTRUCTURED


@dataclass(eq=False)
class Scope:
    """A lexical region owning bindings, linked to its parent."""

    kind: ScopeKind
    node: Node
    parent: "Scope | None" = None
    bindings: dict[str, Binding] = field(default_factory=dict)
    children: list["Scope"] = field(default_factory=list)

    @property
    def is_function_boundary(self) -> bool:
        return self.kind in (ScopeKind.FUNCTION, ScopeKind.MODULE)


class ScopeIndex:
    """Scopes, bindings and resolved references for one parsed file.

    Example usage:
        source = SourceModel.parse(text, path)
        index = ScopeIndex.build(source)
        binding = index.find_binding(index.module_scope, "userName")
        for ref in index.references(binding):
            ...
    """

    def __init__(self, source: SourceModel):
        self.source = source
        self.scopes: list[Scope] = []
        self.free_references: list[Reference] = []
        self._scopes_by_node: dict[tuple, Scope] = {}
        self._declarations: dict[tuple, Binding] = {}
        self._references: dict[tuple, Reference] = {}
        self.module_scope: Scope | None = None

    @classmethod
    def build(cls, source: SourceModel) -> "ScopeIndex":
        """Build a fresh index from a parsed source."""
        return _ScopeBuilder(source).build()

    # -- queries ---------------------------------------------------------

    @staticmethod
    def find_binding(scope: Scope | None, name: str) -> Binding | None:
        """Nearest-enclosing binding for name, or None."""
        current = scope
        while current is not None:
            binding = current.bindings.get(name)
            if binding is not None:
                return binding
            current = current.parent
        return None

    def references(self, binding: Binding) -> list[Reference]:
        """Source-ordered references of a binding.

        The declaration site is included when it has to be rewritten
        identically to the uses (initialized or destructured names).
        """
        refs = list(binding.uses) + list(binding.redeclarations)
        if binding.declaration_is_reference:
            refs.append(binding.declaration)
        return sorted(refs, key=lambda r: r.start)

    def rename_sites(self, binding: Binding) -> list[Reference]:
        """Declaration plus every reference, each range exactly once."""
        seen: set[tuple[int, int]] = set()
        sites = []
        for ref in sorted(
            [binding.declaration, *binding.redeclarations, *binding.uses],
            key=lambda r: r.start,
        ):
            if ref.range in seen:
                continue
            seen.add(ref.range)
            sites.append(ref)
        return sites

    def scope_of(self, node: Node) -> Scope:
        """Innermost scope whose owning node contains node."""
        current: Node | None = node
        while current is not None:
            scope = self._scopes_by_node.get(node_key(current))
            if scope is not None:
                return scope
            current = current.parent
        return self.module_scope

    def binding_at(self, node: Node) -> Binding | None:
        """Binding declared at node, or the binding node refers to."""
        key = node_key(node)
        binding = self._declarations.get(key)
        if binding is not None:
            return binding
        ref = self._references.get(key)
        return ref.binding if ref is not None else None

    def reference_at(self, node: Node) -> Reference | None:
        return self._references.get(node_key(node))

    @property
    def bindings(self) -> list[Binding]:
        return [b for scope in self.scopes for b in scope.bindings.values()]

    def is_free(self, name: str, node: Node) -> bool:
        """True when name is not declared anywhere visible from node."""
        return self.find_binding(self.scope_of(node), name) is None


class _ScopeBuilder:
    """Single depth-first walk producing a ScopeIndex."""

    def __init__(self, source: SourceModel):
        self.source = source
        self.index = ScopeIndex(source)
        self._pending: list[Reference] = []

    def build(self) -> ScopeIndex:
        root = self.source.root
        module = self._new_scope(ScopeKind.MODULE, root, None)
        self.index.module_scope = module
        self._visit_children(root, module)
        self._resolve()
        return self.index

    # -- bookkeeping -----------------------------------------------------

    def _new_scope(self, kind: ScopeKind, node: Node, parent: Scope | None) -> Scope:
        scope = Scope(kind=kind, node=node, parent=parent)
        if parent is not None:
            parent.children.append(scope)
        self.index.scopes.append(scope)
        self.index._scopes_by_node[node_key(node)] = scope
        return scope

    @staticmethod
    def _function_scope(scope: Scope) -> Scope:
        current = scope
        while not current.is_function_boundary and current.parent is not None:
            current = current.parent
        return current

    def _site(self, node: Node, scope: Scope, form: SiteForm, is_declaration: bool) -> Reference:
        start, end = self.source.range_of(node)
        return Reference(
            node=node,
            name=self.source.text_of(node),
            scope=scope,
            start=start,
            end=end,
            form=form,
            is_declaration=is_declaration,
        )

    def _declare(
        self,
        node: Node,
        scope: Scope,
        kind: BindingKind,
        form: SiteForm = SiteForm.PLAIN,
        has_initializer: bool = False,
    ) -> Binding:
        site = self._site(node, scope, form, is_declaration=True)
        existing = scope.bindings.get(site.name)
        if existing is not None:
            site.binding = existing
            existing.redeclarations.append(site)
            self.index._declarations[node_key(node)] = existing
            return existing

        binding = Binding(
            name=site.name,
            kind=kind,
            scope=scope,
            declaration=site,
            has_initializer=has_initializer,
        )
        site.binding = binding
        scope.bindings[site.name] = binding
        self.index._declarations[node_key(node)] = binding
        return binding

    def _reference(self, node: Node, scope: Scope, form: SiteForm = SiteForm.PLAIN) -> None:
        ref = self._site(node, scope, form, is_declaration=False)
        self._pending.append(ref)
        self.index._references[node_key(node)] = ref

    def _resolve(self) -> None:
        for ref in self._pending:
            binding = ScopeIndex.find_binding(ref.scope, ref.name)
            if binding is None:
                self.index.free_references.append(ref)
                continue
            ref.binding = binding
            binding.uses.append(ref)
        for binding in self.index.bindings:
            binding.uses.sort(key=lambda r: r.start)
        logger.debug(
            f"Scope index for {self.source.file_path}: {len(self.index.scopes)} scopes, "
            f"{len(self.index.bindings)} bindings, {len(self.index.free_references)} free references"
        )

    # -- traversal -------------------------------------------------------

    def _visit(self, node: Node, scope: Scope) -> None:
        if node.type == "comment":
            return
        if node.type in TYPE_ONLY_NODES:
            self._visit_type_queries(node, scope)
            return
        handler = getattr(self, f"_visit_{node.type}", None)
        if handler is not None:
            handler(node, scope)
        else:
            self._visit_children(node, scope)

    def _visit_children(self, node: Node, scope: Scope) -> None:
        for child in node.named_children:
            self._visit(child, scope)

    def _visit_identifier(self, node: Node, scope: Scope) -> None:
        self._reference(node, scope)

    def _visit_shorthand_property_identifier(self, node: Node, scope: Scope) -> None:
        self._reference(node, scope, SiteForm.OBJECT_SHORTHAND)

    def _visit_shorthand_property_identifier_pattern(self, node: Node, scope: Scope) -> None:
        # ({ name } = obj) assigns to an existing binding
        self._reference(node, scope, SiteForm.PATTERN_SHORTHAND)

    def _visit_type_queries(self, node: Node, scope: Scope) -> None:
        """Record the value named by each ``typeof x`` inside a type."""
        for child in node.named_children:
            if child.type == "type_query":
                head = _type_query_head(child)
                if head is not None:
                    self._reference(head, scope)
            else:
                self._visit_type_queries(child, scope)

    def _visit_nested_identifier(self, node: Node, scope: Scope) -> None:
        # <Foo.Bar /> in older grammars: only the head is a reference
        head = node.named_children[0] if node.named_children else None
        if head is not None:
            self._visit(head, scope)

    def _visit_jsx_namespace_name(self, node: Node, scope: Scope) -> None:
        return

    # declarations

    def _visit_lexical_declaration(self, node: Node, scope: Scope) -> None:
        for declarator in node.named_children:
            if declarator.type == "variable_declarator":
                self._declare_declarator(declarator, scope, scope)

    def _visit_variable_declaration(self, node: Node, scope: Scope) -> None:
        target = self._function_scope(scope)
        for declarator in node.named_children:
            if declarator.type == "variable_declarator":
                self._declare_declarator(declarator, target, scope)

    def _declare_declarator(self, declarator: Node, target: Scope, scope: Scope) -> None:
        name = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")
        if name is not None:
            self._declare_pattern(
                name, target, BindingKind.VARIABLE, scope, has_initializer=value is not None
            )
        annotation = declarator.child_by_field_name("type")
        if annotation is not None:
            self._visit(annotation, scope)
        if value is not None:
            self._visit(value, scope)

    def _declare_pattern(
        self,
        node: Node,
        target: Scope,
        kind: BindingKind,
        scope: Scope,
        has_initializer: bool = False,
    ) -> None:
        """Declare every name bound by a pattern.

        ``target`` receives the bindings; default values and computed
        keys are evaluated in ``scope``.
        """
        node_type = node.type
        if node_type == "identifier":
            self._declare(node, target, kind, has_initializer=has_initializer)
        elif node_type == "shorthand_property_identifier_pattern":
            self._declare(
                node,
                target,
                BindingKind.DESTRUCTURED,
                SiteForm.PATTERN_SHORTHAND,
                has_initializer=has_initializer,
            )
        elif node_type == "object_pattern":
            for child in node.named_children:
                if child.type == "pair_pattern":
                    key = child.child_by_field_name("key")
                    if key is not None and key.type == "computed_property_name":
                        self._visit_children(key, scope)
                    value = child.child_by_field_name("value")
                    if value is not None:
                        self._declare_pattern(
                            value, target, BindingKind.DESTRUCTURED, scope, has_initializer
                        )
                elif child.type != "comment":
                    self._declare_pattern(
                        child, target, BindingKind.DESTRUCTURED, scope, has_initializer
                    )
        elif node_type in ("object_assignment_pattern", "assignment_pattern"):
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            if left is not None:
                inner_kind = (
                    BindingKind.DESTRUCTURED if node_type == "object_assignment_pattern" else kind
                )
                self._declare_pattern(left, target, inner_kind, scope, has_initializer)
            if right is not None:
                self._visit(right, scope)
        elif node_type == "array_pattern":
            for child in node.named_children:
                if child.type != "comment":
                    self._declare_pattern(
                        child, target, BindingKind.DESTRUCTURED, scope, has_initializer
                    )
        elif node_type == "rest_pattern":
            for child in node.named_children:
                if child.type != "comment":
                    self._declare_pattern(child, target, kind, scope, has_initializer)
        elif node_type in ("required_parameter", "optional_parameter"):
            pattern = node.child_by_field_name("pattern")
            default = node.child_by_field_name("value")
            if pattern is not None:
                self._declare_pattern(pattern, target, kind, scope, has_initializer)
            annotation = node.child_by_field_name("type")
            if annotation is not None:
                self._visit(annotation, scope)
            if default is not None:
                self._visit(default, scope)
        elif node_type in ("this", "comment"):
            return
        else:
            # Assignment targets such as obj.prop inside a pattern
            self._visit(node, scope)

    # functions

    def _visit_function_declaration(self, node: Node, scope: Scope) -> None:
        name = node.child_by_field_name("name")
        if name is not None:
            self._declare(name, scope, BindingKind.FUNCTION)
        self._enter_function(node, scope, declare_own_name=False)

    _visit_generator_function_declaration = _visit_function_declaration

    def _visit_function_expression(self, node: Node, scope: Scope) -> None:
        self._enter_function(node, scope, declare_own_name=True)

    _visit_function = _visit_function_expression
    _visit_generator_function = _visit_function_expression

    def _visit_arrow_function(self, node: Node, scope: Scope) -> None:
        self._enter_function(node, scope, declare_own_name=False)

    def _visit_method_definition(self, node: Node, scope: Scope) -> None:
        name = node.child_by_field_name("name")
        if name is not None and name.type == "computed_property_name":
            self._visit_children(name, scope)
        self._enter_function(node, scope, declare_own_name=False)

    def _enter_function(self, node: Node, scope: Scope, declare_own_name: bool) -> None:
        fn_scope = self._new_scope(ScopeKind.FUNCTION, node, scope)

        if declare_own_name:
            name = node.child_by_field_name("name")
            if name is not None:
                self._declare(name, fn_scope, BindingKind.FUNCTION)

        single = node.child_by_field_name("parameter")
        if single is not None:
            self._declare_pattern(single, fn_scope, BindingKind.PARAMETER, fn_scope)

        params = node.child_by_field_name("parameters")
        if params is not None:
            for param in params.named_children:
                if param.type != "comment":
                    self._declare_pattern(param, fn_scope, BindingKind.PARAMETER, fn_scope)

        for decorator in node.named_children:
            if decorator.type == "decorator":
                self._visit(decorator, scope)

        return_type = node.child_by_field_name("return_type")
        if return_type is not None:
            self._visit(return_type, fn_scope)

        body = node.child_by_field_name("body")
        if body is None:
            return
        if body.type == "statement_block":
            self._visit_children(body, fn_scope)
        else:
            self._visit(body, fn_scope)

    # classes

    def _visit_class_declaration(self, node: Node, scope: Scope) -> None:
        name = node.child_by_field_name("name")
        if name is not None:
            self._declare(name, scope, BindingKind.CLASS)
        self._visit_class_parts(node, scope, own_name=None)

    _visit_abstract_class_declaration = _visit_class_declaration

    def _visit_class(self, node: Node, scope: Scope) -> None:
        self._visit_class_parts(node, scope, own_name=node.child_by_field_name("name"))

    def _visit_class_parts(self, node: Node, scope: Scope, own_name: Node | None) -> None:
        class_scope = self._new_scope(ScopeKind.CLASS, node, scope)
        if own_name is not None:
            self._declare(own_name, class_scope, BindingKind.CLASS)
        name = node.child_by_field_name("name")
        for child in node.named_children:
            if name is not None and node_key(child) == node_key(name):
                continue
            if child.type == "class_body":
                self._visit_children(child, class_scope)
            else:
                self._visit(child, scope)

    # blocks

    def _visit_statement_block(self, node: Node, scope: Scope) -> None:
        block = self._new_scope(ScopeKind.BLOCK, node, scope)
        self._visit_children(node, block)

    def _visit_switch_body(self, node: Node, scope: Scope) -> None:
        block = self._new_scope(ScopeKind.BLOCK, node, scope)
        self._visit_children(node, block)

    def _visit_for_statement(self, node: Node, scope: Scope) -> None:
        block = self._new_scope(ScopeKind.BLOCK, node, scope)
        for child in node.named_children:
            if child.type == "statement_block":
                self._visit_children(child, block)
            else:
                self._visit(child, block)

    def _visit_for_in_statement(self, node: Node, scope: Scope) -> None:
        block = self._new_scope(ScopeKind.BLOCK, node, scope)
        kind = node.child_by_field_name("kind")
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        body = node.child_by_field_name("body")

        if left is not None:
            if kind is not None:
                target = self._function_scope(scope) if kind.type == "var" else block
                self._declare_pattern(
                    left, target, BindingKind.VARIABLE, block, has_initializer=True
                )
            else:
                self._visit(left, block)
        if right is not None:
            self._visit(right, scope)
        if body is not None:
            if body.type == "statement_block":
                self._visit_children(body, block)
            else:
                self._visit(body, block)

    def _visit_catch_clause(self, node: Node, scope: Scope) -> None:
        catch_scope = self._new_scope(ScopeKind.CATCH, node, scope)
        param = node.child_by_field_name("parameter")
        if param is not None:
            self._declare_pattern(param, catch_scope, BindingKind.PARAMETER, catch_scope)
        body = node.child_by_field_name("body")
        if body is not None:
            self._visit_children(body, catch_scope)

    # modules

    def _visit_import_statement(self, node: Node, scope: Scope) -> None:
        for clause in node.named_children:
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                if part.type == "identifier":
                    self._declare(part, scope, BindingKind.IMPORT)
                elif part.type == "namespace_import":
                    for ident in part.named_children:
                        if ident.type == "identifier":
                            self._declare(ident, scope, BindingKind.IMPORT)
                elif part.type == "named_imports":
                    for spec in part.named_children:
                        if spec.type == "import_specifier":
                            self._declare_import_specifier(spec, scope)

    def _declare_import_specifier(self, spec: Node, scope: Scope) -> None:
        alias = spec.child_by_field_name("alias")
        if alias is not None:
            self._declare(alias, scope, BindingKind.IMPORT)
            return
        name = spec.child_by_field_name("name")
        if name is not None and name.type == "identifier":
            self._declare(name, scope, BindingKind.IMPORT, SiteForm.IMPORT_SPECIFIER)

    def _visit_export_statement(self, node: Node, scope: Scope) -> None:
        if node.child_by_field_name("source") is not None:
            return  # re-export from another module
        self._visit_children(node, scope)

    def _visit_export_specifier(self, node: Node, scope: Scope) -> None:
        name = node.child_by_field_name("name")
        alias = node.child_by_field_name("alias")
        if name is None or name.type != "identifier":
            return
        form = SiteForm.PLAIN if alias is not None else SiteForm.EXPORT_SPECIFIER
        self._reference(name, scope, form)

    # typescript

    def _visit_enum_declaration(self, node: Node, scope: Scope) -> None:
        name = node.child_by_field_name("name")
        if name is not None:
            self._declare(name, scope, BindingKind.ENUM)
