"""Application layer - presence bookkeeping."""
