"""
Application Modules.

- backend/: API, database, configuration, quoting and vehicle lookup
"""
