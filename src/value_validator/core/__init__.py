"""
Core validation engine: codec, presets, rules and the Validator facade.
"""
