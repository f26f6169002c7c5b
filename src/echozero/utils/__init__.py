"""Logging and configuration helpers for echozero."""
