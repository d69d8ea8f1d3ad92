"""Collection, question index and checks."""
