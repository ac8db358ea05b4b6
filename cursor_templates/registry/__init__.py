"""Registry — taxonomy, curated lists and discovery over the template store.

The registry provides:
- Discovery: keyword search with exact-name ranking and category filters
- Categorization: tag-derived, non-exclusive category counts
- Curation: featured, trending and recommended templates
- Import: placeholder templates for external repositories
"""
