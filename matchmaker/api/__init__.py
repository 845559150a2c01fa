"""HTTP adapter feeding intents into a matchmaker."""
