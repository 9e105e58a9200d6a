"""CoinCompare: side-by-side cryptocurrency comparison backend."""
