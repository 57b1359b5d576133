"""Core foldexpr modules: IR, errors, settings and the expression language."""
