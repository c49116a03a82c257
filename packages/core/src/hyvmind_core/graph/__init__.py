"""Graph core: access control, membership, node store, law tokens, votes and the read model."""
