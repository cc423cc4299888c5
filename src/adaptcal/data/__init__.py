"""Input loading and sanitation."""
