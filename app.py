# app.py
"""
MRP Log Analyzer application entry point
Creates the Flask app, configures logging and serves it with Waitress.
"""

import logging
from logging.handlers import RotatingFileHandler
from flask import Flask, jsonify
import os
import socket

from config import Config


def configure_logging(app):
    """Install the rotating file and console handlers on the root logger."""
    log_level = getattr(logging, Config.LOG_LEVEL, logging.INFO)

    # Console Handler (so you still see logs in the service window)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s %(name)s %(threadName)s : %(message)s'
    ))
    console_handler.setLevel(log_level)

    handlers = [console_handler]

    if not Config.TEST_MODE:
        os.makedirs(Config.LOG_DIR, exist_ok=True)

        # Rotates at LOG_MAX_BYTES, keeps LOG_BACKUP_COUNT backups
        file_handler = RotatingFileHandler(
            os.path.join(Config.LOG_DIR, 'portal.log'),
            maxBytes=Config.LOG_MAX_BYTES,
            backupCount=Config.LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(log_level)
        handlers.insert(0, file_handler)

    app.logger.handlers = [] # Clear default handlers
    root_logger = logging.getLogger()
    root_logger.handlers = []
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    app.logger.setLevel(log_level)


def create_app():
    app = Flask(__name__)

    # Configuration
    app.secret_key = Config.SECRET_KEY
    # Two uploads per comparison, plus form overhead
    app.config['MAX_CONTENT_LENGTH'] = 2 * Config.max_upload_bytes() + 1024 * 1024

    configure_logging(app)
    app.logger.info('--- Application Starting Up ---')

    register_blueprints(app)

    @app.errorhandler(413)
    def upload_too_large(error):
        return jsonify({'success': False, 'message': 'Upload exceeds the size limit.'}), 413

    app.logger.info('Flask app created and configured.')

    return app


def register_blueprints(app):
    """Register all application blueprints"""
    from routes.mrp_logs import mrp_logs_bp

    app.register_blueprint(mrp_logs_bp)


def get_local_ip():
    """Get the local IP address of the machine"""
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        s.connect(("8.8.8.8", 80))
        local_ip = s.getsockname()[0]
        s.close()
        return local_ip
    except OSError:
        return "127.0.0.1"


if __name__ == '__main__':
    # Startup messages before create_app installs the real handlers
    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s : %(message)s')

    if not Config.validate():
        raise SystemExit(1)

    local_ip = get_local_ip()

    logging.info("=" * 50)
    logging.info(f"MRP LOG ANALYZER v{os.environ.get('APP_VERSION', '?.?.?')}")
    logging.info("=" * 50)
    logging.info(f"Mode: {'TEST' if Config.TEST_MODE else 'PRODUCTION'}")
    logging.info(f"Upload limit: {Config.MRP_LOG_MAX_UPLOAD_MB} MB ({', '.join(Config.MRP_LOG_ALLOWED_EXTENSIONS)})")

    app = create_app()

    logging.info("=" * 60)
    logging.info("SERVER STARTING (HTTP via Waitress) - ACCESS URLS:")
    logging.info(f"Local:        http://localhost:{Config.PORT}/mrp-logs")
    logging.info(f"Network:      http://{local_ip}:{Config.PORT}/mrp-logs")
    logging.info("=" * 60)

    try:
        from waitress import serve
        logging.info("Starting Waitress server...")
        serve(app, host=Config.HOST, port=Config.PORT)
    except Exception as e:
        logging.exception(f"FATAL: Failed to start Waitress server: {e}")
        raise
