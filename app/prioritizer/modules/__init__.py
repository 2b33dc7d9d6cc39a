"""
API modules live under this package.

Keep module boundaries clean: each module owns its validation (service.py) and
its JSON routes (api.py), while reusing platform primitives (auth, store, web).
"""
