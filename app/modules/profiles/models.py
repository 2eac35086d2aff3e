# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- full_name: text (nullable)
- username: text (nullable, unique)
- website: text (nullable)
- bio: text (nullable)
- updated_at: timestamptz (nullable) - written by the service on every save

    create table public.profiles (
        id uuid primary key references auth.users (id) on delete cascade,
        full_name text,
        username text unique,
        website text,
        bio text,
        updated_at timestamptz
    );

A duplicate username is rejected by the unique constraint with PostgreSQL
error code 23505, which ProfileService passes through on ProfileStoreError.code.
Rows are created on first save (upsert on id); nothing in this service deletes them.
"""
