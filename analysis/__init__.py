"""Throw analysis pipeline and command-line front-end."""
