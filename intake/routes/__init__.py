# Routes package init
"""
Record Intake Service — API Routes Package
============================================

Route Inventory:
    - records.py:  POST /save                (submit an entry, optional image)
                   GET  /all                 (all entries, newest first)
                   GET  /entry/{record_id}   (single entry)
    - uploads.py:  GET  /uploads/{filename}  (stored image bytes)
    - health.py:   GET  /health              (service health check)

Routes stay thin: extract request data, call IntakeService or a store,
return a schema. Errors are rendered by the handlers in main.py.
"""
