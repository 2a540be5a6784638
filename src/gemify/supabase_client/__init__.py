"""Supabase access layer."""
