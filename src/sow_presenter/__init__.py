"""Stream of Worship Presenter - live lyrics and scripture presentation.

This package provides tools for:
- Assembling service schedules of songs, scriptures and images
- Presenting schedule entries slide by slide to remote displays
- Keeping every display in sync over a per-schedule broadcast channel
"""

__version__ = "0.1.0"
