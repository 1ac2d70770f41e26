"""Association verification: does A exist, does B exist, and is A -> B a valid association?

Resolves both identifiers through the schema directory (falling back to an
objects API probe), queries association types in the caller's direction
only when both exist, and returns an immutable ``VerificationVerdict``.

Entry point: ``hubspot_inspector.verify.engine.VerificationEngine.verify()``
"""
