"""Core stages of the tokensmith compiler."""
