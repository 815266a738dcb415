"""
Spreadsheet ingestion package.

Responsibilities:
- Fetch the menu grid from the Google Sheets values API (or a CSV export).
- Derive per-pass correlation ids for restaurants and menu items.
- Parse raw rows into a normalized Snapshot.
"""
