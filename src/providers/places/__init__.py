"""Third-party places search providers (candidate bars near a coordinate)."""
