"""FastAPI + HTMX web application."""
