"""Statistics, weather correlation and summaries over aggregated usage."""
