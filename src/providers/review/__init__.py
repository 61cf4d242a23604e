"""Review persistence providers (star ratings and comments per place)."""
