# Supabase table: links
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, not null, on delete cascade)
- title: text (not null)
- url: text (not null) - stored as entered; a scheme is added at click time
- is_active: boolean (not null, default: true) - owner toggle, independent of scheduling
- order: integer (not null, default: 0) - display position among the owner's links
- clicks: integer (not null, default: 0) - incremented by increment_link_clicks()
- scheduled_at: timestamptz (nullable) - link is not live before this instant
- expires_at: timestamptz (nullable) - link is no longer live at/after this instant
- password: text (nullable) - visitors must pass /check-password before opening
- created_at: timestamptz (default: now())
- updated_at: timestamptz (nullable)

Supabase table: link_analytics
- id: uuid (primary key)
- link_id: uuid (foreign key to links.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id)
- ip_address: text (nullable)
- user_agent: text (nullable)
- referer: text (nullable)
- created_at: timestamptz (default: now())

RPC: increment_link_clicks(link_id uuid) - atomically does clicks = clicks + 1
"""
