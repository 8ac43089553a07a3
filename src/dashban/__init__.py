"""dashban: GitHub issue kanban board sync."""

__version__ = "0.1.0"
