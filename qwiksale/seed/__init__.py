"""Database seeding: demo accounts, catalog expansion and cleanup."""
