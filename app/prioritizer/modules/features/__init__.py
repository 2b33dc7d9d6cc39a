"""
Feature requests module.

Scope:
- Features CRUD under /api/features
- Search / filter / sort on the list endpoint
- Total score is derived by the store; request bodies never set it
"""
