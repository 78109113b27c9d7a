"""Database layer for schedules and presentable content."""
