"""
Data-quality checks for loaded catalogs.

Findings are warn-only: a catalog with issues is still indexed and browsable.
"""
