"""Travel planner maintenance service: expense category backfill."""

__version__ = "0.1.0"
