"""
Sub-source validator: datasheet completeness and substitute-part compliance
"""
__version__ = "1.0.0"
