"""Textual widgets for the REPL screen."""
