"""Path graph construction over a schema."""
