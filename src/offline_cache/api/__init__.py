"""FastAPI host that plays the role of the hosting runtime."""
