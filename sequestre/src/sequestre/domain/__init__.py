"""
Sequestre domain layer.
"""
