"""
Utilidades compartidas
"""
