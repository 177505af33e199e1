"""Request middleware: identity and locale resolution."""
