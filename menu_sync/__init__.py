"""
Menu synchronization service.

Responsibilities:
- Read a spreadsheet of restaurant menus (Google Sheets API or a CSV export).
- Normalize rows into Restaurant / MenuItem records.
- Upsert restaurants, their main menu and menu items into the catalog API.
- Expose run status and a manual trigger over HTTP.
"""
