"""GoldBoard: personal gold price dashboard."""
