"""Importable declarations used by the runtime symbol table tests."""
