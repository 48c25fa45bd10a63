"""Report engine: period arithmetic, densification and running totals."""
