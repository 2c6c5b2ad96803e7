# Supabase table: admin_users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in app/core/dependencies.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- email: text (unique, not null) - matched against the Supabase Auth user's email
- created_at: timestamptz (default: now())
"""
