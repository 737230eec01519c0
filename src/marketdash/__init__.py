"""Market analytics API: exchange candles in, time-series indicators out."""
