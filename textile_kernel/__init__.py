"""
Textile Kernel - production tracking core

Domain model, persistence and write services for textile production:
- Customer orders split across producer workshops
- Cutting reports confirming cut quantities per order group
- Stock receipts of normal and defective goods
- Deterministic attribution of received stock back to orders
"""

__version__ = "0.1.0"
