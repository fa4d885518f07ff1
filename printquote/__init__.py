"""
PrintQuote: costing and quoting backend for 3D-printing shops.
"""
