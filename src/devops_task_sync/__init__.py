"""Import Azure DevOps work items as time-tracking tasks."""

__version__ = "0.1.0"
