"""
Servicios: parser de pedidos, diferencias entre ediciones, tickets y webhooks
"""
