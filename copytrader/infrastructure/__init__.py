"""Infrastructure layer - adapters for Aptos, database, Telegram."""
