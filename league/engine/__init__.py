"""Tournament progression rules: pure functions, no store and no I/O."""
