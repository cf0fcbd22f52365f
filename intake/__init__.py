"""
Record Intake Service — Application Package
=============================================

What: Small FastAPI service that accepts a name, mobile number and occupation
      plus an optional image, persists the record, and lists/retrieves them.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     IntakeService (pipeline)        │  ← validate → store → persist
    ├──────────────────┬──────────────────┤
    │    BlobStore     │   RecordStore    │  ← disk / async SQLAlchemy
    └──────────────────┴──────────────────┘

    Collaborators are built once by `intake.main.create_app()` and attached to
    `app.state`; nothing below the routes reads module-level globals.
"""

__version__ = "1.0.0"
