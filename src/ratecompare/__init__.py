"""Compare electricity rate plans against interval usage exports."""
