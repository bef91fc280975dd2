"""
Edition Bonding Curve Pricing Package

This package prices sequentially minted limited-edition tokens as a function of the number
already issued. It is used to preview price and revenue projections in a curve editor, to
quote the price of the next edition, and to precompute the integer price table an on-chain
program enforces at mint time.

The package includes:
- Closed-form pricing (linear, exponential, logarithmic)
- Piecewise cubic Bezier price curves with Newton-Raphson inversion
- Curve templates, continuity repair and segment editing
- Curve validation that reports every problem at once
- Bounded price table generation for on-chain enforcement
- Revenue and tokenomics projections
- MCP server exposing the engine as tools
"""
