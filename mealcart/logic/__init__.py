"""Core business logic layer.

Subpackages:
- ingredients: merging suggested ingredients into user-edited lists
- shopping: aggregating plans into shopping lists, costs, archive
- planning: plan field updates and date-range selection
- library: library edits and suggestion sync

Everything here works on domain values; persistence goes through the
repositories in mealcart.infra.
"""
__all__ = ["ingredients", "shopping", "planning", "library"]
