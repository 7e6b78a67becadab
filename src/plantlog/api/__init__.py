"""API layer: canonical surface for the CLI and any other front end.

Key rules:

1. No SQLAlchemy imports - talk to the injected DocumentStore only
2. Validation happens here, before any fetch is issued
3. Return FetchState / PlantRecord models, never raw documents
"""
