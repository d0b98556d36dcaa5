"""Check that the Supabase tables the backend needs exist.

Usage:
    python scripts/check_schema.py

Reads SUPABASE_URL and SUPABASE_SERVICE_KEY from the environment (or .env).
For every missing table the matching SQL (with row-level security policies)
is printed so it can be pasted into the Supabase SQL editor.
"""

import os
import sys
from typing import Dict, List

from dotenv import load_dotenv
from supabase import Client, create_client

TABLE_SQL: Dict[str, str] = {
    "users": """
CREATE TABLE IF NOT EXISTS users (
  id UUID REFERENCES auth.users(id) PRIMARY KEY,
  email TEXT UNIQUE NOT NULL,
  name TEXT,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);
ALTER TABLE users ENABLE ROW LEVEL SECURITY;
CREATE POLICY "Users can view own profile" ON users FOR SELECT USING (auth.uid() = id);
CREATE POLICY "Users can update own profile" ON users FOR UPDATE USING (auth.uid() = id);
""",
    "messages": """
CREATE TABLE IF NOT EXISTS messages (
  id SERIAL PRIMARY KEY,
  user_id UUID REFERENCES users(id) ON DELETE CASCADE,
  content TEXT NOT NULL,
  role TEXT NOT NULL CHECK (role IN ('user', 'assistant')),
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);
ALTER TABLE messages ENABLE ROW LEVEL SECURITY;
CREATE POLICY "Users can view own messages" ON messages FOR SELECT USING (auth.uid() = user_id);
CREATE POLICY "Users can insert own messages" ON messages FOR INSERT WITH CHECK (auth.uid() = user_id);
""",
    "canvas_objects": """
CREATE TABLE IF NOT EXISTS canvas_objects (
  id SERIAL PRIMARY KEY,
  user_id UUID REFERENCES auth.users(id) ON DELETE CASCADE,
  object_type TEXT NOT NULL CHECK (object_type IN ('rectangle', 'circle', 'text', 'line')),
  object_data JSONB NOT NULL,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);
ALTER TABLE canvas_objects ENABLE ROW LEVEL SECURITY;
CREATE POLICY "Users can view own canvas objects" ON canvas_objects FOR SELECT USING (auth.uid() = user_id);
CREATE POLICY "Users can insert own canvas objects" ON canvas_objects FOR INSERT WITH CHECK (auth.uid() = user_id);
CREATE POLICY "Users can update own canvas objects" ON canvas_objects FOR UPDATE USING (auth.uid() = user_id);
CREATE POLICY "Users can delete own canvas objects" ON canvas_objects FOR DELETE USING (auth.uid() = user_id);
""",
    "projects": """
CREATE TABLE IF NOT EXISTS projects (
  id SERIAL PRIMARY KEY,
  user_id UUID REFERENCES users(id) ON DELETE CASCADE,
  name TEXT NOT NULL,
  description TEXT,
  status TEXT DEFAULT 'active',
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);
ALTER TABLE projects ENABLE ROW LEVEL SECURITY;
CREATE POLICY "Users can view own projects" ON projects FOR SELECT USING (auth.uid() = user_id);
CREATE POLICY "Users can insert own projects" ON projects FOR INSERT WITH CHECK (auth.uid() = user_id);
""",
}


def find_missing_tables(client: Client) -> List[str]:
    """Return the tables from TABLE_SQL that can't be queried."""
    missing = []
    for table in TABLE_SQL:
        try:
            client.table(table).select("*").limit(1).execute()
            print(f"✓ {table}")
        except Exception as e:
            print(f"✗ {table}: {e}")
            missing.append(table)
    return missing


def main() -> int:
    load_dotenv()
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_SERVICE_KEY")
    if not url or not key:
        print("ERROR: SUPABASE_URL and SUPABASE_SERVICE_KEY must be set.")
        return 2

    missing = find_missing_tables(create_client(url, key))
    if not missing:
        print("All tables present.")
        return 0

    print("\nRun the following SQL in the Supabase SQL editor:\n")
    for table in missing:
        print(TABLE_SQL[table].strip())
        print()
    return 1


if __name__ == "__main__":
    sys.exit(main())
