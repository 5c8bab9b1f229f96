"""Domain services: user directory, authentication and bootstrap seeding."""
