"""FastAPI service exposing the inbox CRM."""
