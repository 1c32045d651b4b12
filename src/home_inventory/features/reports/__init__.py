"""Inventory reports for home-inventory

This package builds access-scoped inventory reports: summary statistics,
a per-category breakdown and the matching item list, exported as JSON or
CSV. An account sees items from inventories it owns, inventories shared
with it, and inventories of accounts that granted it access.

Endpoints require authentication. Every failure is raised as a
``ReportError`` and rendered by a single exception handler into the
standard response envelope."""
