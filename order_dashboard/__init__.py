"""
Backend de pedidos de la hamburguesería
Recibe pedidos del bot, los guarda y manda los tickets a cocina y caja
"""
