# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:
- id: uuid (primary key, references auth.users.id)
- username: text (unique, not null) - public page path
- display_name: text (nullable)
- bio: text (nullable)
- profile_image: text (nullable)
- theme: text (nullable)
- created_at: timestamptz (default: now())
- updated_at: timestamptz (nullable)
"""
