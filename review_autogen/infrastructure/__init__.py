# Infrastructure Layer
# ====================
# Contains all external service integrations:
# - scheduling/: One-shot delayed timers (threads or virtual clock)
# - persistence/: SQLite product catalog and review store
# - importer/: CSV/Excel catalog import
# - config/: Environment and settings management
#
# This layer can be replaced entirely without affecting domain/application layers.
