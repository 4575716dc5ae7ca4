from flask import Flask

from gravis.modules.auth.routes import bp as auth_bp
from gravis.modules.cart.routes import api_bp as cart_api_bp, bp as cart_bp
from gravis.modules.catalog.routes import api_bp as catalog_api_bp, bp as catalog_bp
from gravis.modules.inquiry.routes import api_bp as inquiry_api_bp, bp as inquiry_bp
from gravis.modules.pages.routes import bp as pages_bp


def register_blueprints(app: Flask) -> None:
    # Server-rendered pages
    app.register_blueprint(pages_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(inquiry_bp)
    app.register_blueprint(auth_bp)

    # JSON endpoints used by storefront.js
    app.register_blueprint(catalog_api_bp, url_prefix="/api")
    app.register_blueprint(cart_api_bp, url_prefix="/api")
    app.register_blueprint(inquiry_api_bp, url_prefix="/api")

    # Root API document
    @app.get("/api")
    def api_index():
        return {
            "name": "Gravis Storefront API",
            "version": "0.1.0",
            "endpoints": {
                "catalog": ["/products", "/product-categories", "/product-categories/<id>/filters"],
                "cart": ["/cart", "/cart/<product_id>"],
                "inquiry": ["/inquiry/contact"],
            },
        }, 200
