"""FastAPI application exposing the terminal to the register UI."""
