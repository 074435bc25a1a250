"""
Main Flask Application
"""
from flask import Flask
from flask_cors import CORS

from .config import MAX_UPLOAD_MB
from .services.session_state import ValidationController


def create_app(controller: ValidationController = None) -> Flask:
    app = Flask(__name__)
    CORS(app)
    app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_MB * 1024 * 1024
    app.extensions['validation_controller'] = controller or ValidationController()

    from .api.analyze_routes import analyze_bp
    from .api.files_routes import files_bp
    from .api.session_routes import session_bp

    app.register_blueprint(files_bp, url_prefix='/api/files')
    app.register_blueprint(analyze_bp, url_prefix='/api')
    app.register_blueprint(session_bp, url_prefix='/api')

    return app


def main():
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=True)


if __name__ == "__main__":
    main()
