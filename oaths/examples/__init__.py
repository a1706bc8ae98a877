"""Runnable examples exercising oaths against real collaborators."""
