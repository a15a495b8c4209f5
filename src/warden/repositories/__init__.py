"""Table-level CRUD helpers taking an open aiosqlite connection."""
