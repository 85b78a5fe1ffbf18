"""Operations layer for the standards server.

This package handles API-facing operations:
- Tool handlers shared by MCP and REST (StandardsTools)
- Canonical-path migration of legacy files (StandardsMigrator)
"""
