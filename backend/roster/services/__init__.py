# Services package init
"""
Roster Backend: Services Layer
================================

What:  Business rules sitting between routes (HTTP) and repositories (storage).

Service Inventory:
    - StudentService: email uniqueness on create/update, partial updates,
      existence checks before delete
"""
