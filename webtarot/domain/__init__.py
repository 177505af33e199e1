"""Plain domain types: cards, deck, readings, interpretations, identities."""
