# Services package init
"""
Record Intake Service — Services Layer
========================================

Service Inventory:
    - BlobStore:      image validation (extension + MIME + size) and disk storage
    - RecordStore:    async SQLAlchemy create / list / get-by-id
    - IntakeService:  POST /save pipeline over the two stores

Services never touch HTTP objects; routes translate requests into calls
and the exception handlers in main.py translate failures into responses.
"""
