"""Discord-side implementations of the output and follow-up ports."""
