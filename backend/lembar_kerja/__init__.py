import logging
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from config import Config
from flask_migrate import Migrate

# 1. Inisialisasi ekstensi di scope global
db = SQLAlchemy()
migrate = Migrate()

def create_app(config_class=Config):
    """Factory function untuk membuat instance aplikasi Flask."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # 2. Inisialisasi ekstensi dengan aplikasi
    db.init_app(app)
    migrate.init_app(app, db)

    CORS(app, resources={r"/api/*": {"origins": app.config.get('CORS_ORIGINS', [])}})

    # Setup Logging
    logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'), format='%(asctime)s - [%(levelname)s] - %(message)s')

    # 3. Semua registrasi blueprint di satu tempat
    with app.app_context():
        from . import models  # noqa: F401  (tabel harus terdaftar untuk Flask-Migrate)
        from .worksheets.routes import worksheets_bp
        from .laporan.routes import laporan_bp

        app.register_blueprint(worksheets_bp)
        app.register_blueprint(laporan_bp)

        app.logger.info("Semua blueprints telah diregistrasi.")

    # 4. API selalu membalas JSON, bukan halaman error HTML
    @app.errorhandler(404)
    def not_found(error):
        return jsonify(error="Endpoint tidak ditemukan"), 404

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Kesalahan internal server: {error}")
        return jsonify(error="Kesalahan internal server"), 500

    return app
