"""
Backend de pedidos - punto de entrada
"""
from order_dashboard.app_factory import create_app

# Crear instancia de la app para gunicorn
app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5000)
