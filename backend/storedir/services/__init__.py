"""Services Layer: async orchestration around the pure core.

Invariants:
    - Services receive repositories through their constructors (no registries)
    - CatalogService is the only entry point routes call
"""
