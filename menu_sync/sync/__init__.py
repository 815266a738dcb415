"""
Reconciliation and run management.

Responsibilities:
- Upsert each parsed restaurant, resolve its main menu and replace its items.
- Isolate failures per restaurant and summarize them in a SyncReport.
- Coalesce overlapping runs and publish run status to observers.
- Re-run the sync on a fixed interval.
"""
