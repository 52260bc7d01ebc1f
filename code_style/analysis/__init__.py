"""Parsing and scope analysis for JavaScript/TypeScript sources."""

from .scope import Binding, BindingKind, Reference, Scope, ScopeIndex, ScopeKind, SiteForm
from .source import SUPPORTED_EXTENSIONS, SourceModel, Token

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "Binding",
    "BindingKind",
    "Reference",
    "Scope",
    "ScopeIndex",
    "ScopeKind",
    "SiteForm",
    "SourceModel",
    "Token",
]
