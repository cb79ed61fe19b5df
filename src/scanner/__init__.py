"""Multi-exchange crypto price scanner."""
