"""
Style rules and the engine that runs them.

Rules live in category packages (naming, structure, formatting) and are
auto-discovered by RuleDiscovery.
"""
