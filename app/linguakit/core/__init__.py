"""Shared configuration and logging for linguakit."""
