# Review Autogen - Delayed Synthetic-Review Scheduler
# ===================================================
# Schedules synthetic product reviews at random times through the day
# and stores them once they fire. Layered Architecture:
#
# ARCHITECTURE LAYERS:
# - Presentation:   run_scheduler.py entry point (external trigger)
# - Application:    Scheduling cycle and daily trigger (no content rules)
# - Domain:         Review synthesis, randomness, records (no external dependencies)
# - Infrastructure: Timers, SQLite storage, catalog import, settings
#
# This design allows easy replacement of infrastructure components
# (e.g., swap SQLite for Postgres, or real timers for a virtual clock).
