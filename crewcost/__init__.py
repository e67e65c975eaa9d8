"""CrewCost - shared project expenses with cost splitting and budget tracking."""

__version__ = "1.0.0"
