"""codeunit command line interface."""
