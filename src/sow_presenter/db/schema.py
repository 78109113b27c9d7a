"""SQL schema definitions for the presenter database.

Defines the catalog tables (songs, scriptures) and the schedule tables
(schedules, schedule_images, schedule_entries).
"""

# SQL to create the songs table
CREATE_SONGS_TABLE = """
CREATE TABLE IF NOT EXISTS songs (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    content TEXT,
    created_at TEXT DEFAULT (datetime('now'))
);
"""

# SQL to create the scriptures table (passages built from the bible browser)
CREATE_SCRIPTURES_TABLE = """
CREATE TABLE IF NOT EXISTS scriptures (
    id TEXT PRIMARY KEY,
    book_id TEXT NOT NULL,
    chapter_num INTEGER NOT NULL,
    verse_from INTEGER,
    verse_to INTEGER,
    bible_version TEXT,
    content TEXT,
    created_at TEXT DEFAULT (datetime('now'))
);
"""

# SQL to create the schedules table
CREATE_SCHEDULES_TABLE = """
CREATE TABLE IF NOT EXISTS schedules (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    created_at TEXT DEFAULT (datetime('now')),
    updated_at TEXT DEFAULT (datetime('now'))
);
"""

# SQL to create the schedule_images table (images belong to one schedule)
CREATE_SCHEDULE_IMAGES_TABLE = """
CREATE TABLE IF NOT EXISTS schedule_images (
    id TEXT PRIMARY KEY,
    schedule_id TEXT NOT NULL REFERENCES schedules(id) ON DELETE CASCADE,
    name TEXT,
    image_url TEXT NOT NULL,
    created_at TEXT DEFAULT (datetime('now'))
);
"""

# SQL to create the schedule_entries table (polymorphic item reference)
CREATE_SCHEDULE_ENTRIES_TABLE = """
CREATE TABLE IF NOT EXISTS schedule_entries (
    id TEXT PRIMARY KEY,
    schedule_id TEXT NOT NULL REFERENCES schedules(id) ON DELETE CASCADE,
    item_type TEXT NOT NULL,
    item_id TEXT NOT NULL,
    position INTEGER NOT NULL,
    created_at TEXT DEFAULT (datetime('now')),
    CHECK (item_type IN ('song', 'scripture', 'image'))
);
"""

# Indexes for efficient lookups
CREATE_INDEXES = [
    """
    CREATE INDEX IF NOT EXISTS idx_schedule_entries_schedule_id
    ON schedule_entries(schedule_id);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_schedule_entries_position
    ON schedule_entries(schedule_id, position);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_schedule_entries_item
    ON schedule_entries(item_type, item_id);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_schedule_images_schedule_id
    ON schedule_images(schedule_id);
    """,
]

# Trigger to update updated_at on schedules
CREATE_SCHEDULES_UPDATE_TRIGGER = """
CREATE TRIGGER IF NOT EXISTS trg_schedules_updated_at
AFTER UPDATE ON schedules
BEGIN
    UPDATE schedules SET updated_at = datetime('now') WHERE id = NEW.id;
END;
"""

# Scriptures are created for a single entry and die with it
CREATE_SCRIPTURE_CASCADE_TRIGGER = """
CREATE TRIGGER IF NOT EXISTS trg_schedule_entries_delete_scripture
AFTER DELETE ON schedule_entries
WHEN OLD.item_type = 'scripture'
BEGIN
    DELETE FROM scriptures WHERE id = OLD.item_id;
END;
"""

# All schema creation statements in order
ALL_SCHEMA_STATEMENTS = [
    CREATE_SONGS_TABLE,
    CREATE_SCRIPTURES_TABLE,
    CREATE_SCHEDULES_TABLE,
    CREATE_SCHEDULE_IMAGES_TABLE,
    CREATE_SCHEDULE_ENTRIES_TABLE,
    *CREATE_INDEXES,
    CREATE_SCHEDULES_UPDATE_TRIGGER,
    CREATE_SCRIPTURE_CASCADE_TRIGGER,
]

# Table names reported by `sow-presenter db status`
ALL_TABLES = ["songs", "scriptures", "schedules", "schedule_images", "schedule_entries"]
