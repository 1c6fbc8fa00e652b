# Core package - foundational components
#
# Modules:
# - config: Application settings
# - errors: Error kinds shared by storage and API
# - logging: Structured logging
# - storage: Pluggable product repositories (PostgreSQL, in-memory)
