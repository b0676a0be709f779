"""Taskdesk: task-management backend on FastAPI, Beanie and MongoDB."""
