"""
Backend OCCR: On-Chain Credit Risk scoring engine for wallets.

Turns a wallet snapshot (loan history, open positions, transfers, holdings)
into five risk subscores, a composite probability, a 0-1000 score and an
A-D tier. Modular layout: analysis_engine holds the math, analytics the
pipeline, oracle the downstream score sink.
"""

__version__ = "0.1.0"
