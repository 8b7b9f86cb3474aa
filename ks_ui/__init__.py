"""Command-line front end for kubestrike."""
