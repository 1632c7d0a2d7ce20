"""Backend services: Supabase data access and catalog helpers."""
