# petfoundus/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
import firebase_admin
from firebase_admin import credentials

# - 설정
from petfoundus.core.config import config_by_name

# - API 블루프린트
from petfoundus.api.adopters.routes import adopters_bp
from petfoundus.api.pets.routes import pets_bp, shelter_pets_bp
from petfoundus.api.adoption_requests.routes import adopter_requests_bp, shelter_requests_bp
from petfoundus.api.reminders.routes import reminders_bp, reminder_templates_bp
from petfoundus.api.shelters.routes import shelters_bp
from petfoundus.api.reports.routes import reports_bp
from petfoundus.api.pet_updates.routes import pet_updates_bp
from petfoundus.api.ai.routes import ai_bp, chat_bp
from petfoundus.api.vet_clinics.routes import vet_clinics_bp
from petfoundus.api.system.routes import system_bp

# - 서비스 모듈
from petfoundus.services.openai_service import OpenAIService
from petfoundus.api.adopters.services import AdopterService
from petfoundus.api.pets.services import PetService
from petfoundus.api.adoption_requests.services import AdoptionRequestService
from petfoundus.api.reminders.services import CareReminderService, ReminderTemplateService
from petfoundus.api.shelters.services import ShelterService
from petfoundus.api.reports.services import ReportService
from petfoundus.api.pet_updates.services import PetUpdateService
from petfoundus.api.ai.services import ChatService
from petfoundus.api.vet_clinics.services import VetClinicService


def init_firebase(app: Flask):
    """Firebase Admin SDK를 한 번만 초기화합니다."""
    if firebase_admin._apps:
        return
    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
    firebase_admin.initialize_app(credentials.Certificate(cred_path))


def create_app(config_name: str = None):
    """
    Flask 애플리케이션 팩토리 함수.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.config.get('JWT_SECRET_KEY'):
        raise ValueError("JWT_SECRET_KEY 환경 변수가 설정되지 않았습니다.")

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    JWTManager(app)
    CORS(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}})
    init_firebase(app)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 공용/핵심 서비스 먼저 생성
    try:
        openai_instance = OpenAIService()
        openai_instance.init_app(app)
        app.services['openai'] = openai_instance
        logging.info("OpenAI service initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize OpenAI service: {e}")
        raise

    app.services['reminders'] = CareReminderService()
    app.services['reminder_templates'] = ReminderTemplateService()
    app.services['pets'] = PetService()

    # 5-2. 다른 서비스를 주입받아야 하는 도메인 서비스 생성
    app.services['adoption_requests'] = AdoptionRequestService(reminder_service=app.services['reminders'])
    app.services['adopters'] = AdopterService()
    app.services['shelters'] = ShelterService(
        pet_service=app.services['pets'],
        request_service=app.services['adoption_requests']
    )
    app.services['reports'] = ReportService(pet_service=app.services['pets'])
    app.services['pet_updates'] = PetUpdateService()
    app.services['chat'] = ChatService(
        openai_service=app.services['openai'],
        history_limit=app.config['CHAT_HISTORY_LIMIT']
    )
    app.services['vet_clinics'] = VetClinicService()

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(system_bp, url_prefix='/api')

    # - 입양자 도메인
    app.register_blueprint(adopters_bp, url_prefix='/api/adopters')
    app.register_blueprint(pets_bp, url_prefix='/api/adopters/pets')
    app.register_blueprint(adopter_requests_bp, url_prefix='/api/adopters')

    # - 보호소 도메인
    app.register_blueprint(shelters_bp, url_prefix='/api/shelters')
    app.register_blueprint(shelter_pets_bp, url_prefix='/api/shelters')
    app.register_blueprint(shelter_requests_bp, url_prefix='/api/shelters')
    app.register_blueprint(reminder_templates_bp, url_prefix='/api/shelters')

    # - 나머지 도메인
    app.register_blueprint(reminders_bp, url_prefix='/api/reminders')
    app.register_blueprint(reports_bp, url_prefix='/api/reports')
    app.register_blueprint(pet_updates_bp, url_prefix='/api/pet-updates')
    app.register_blueprint(ai_bp, url_prefix='/api/ai')
    app.register_blueprint(chat_bp, url_prefix='/api/chat')
    app.register_blueprint(vet_clinics_bp, url_prefix='/api/vet-clinics')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        response = {"success": False, "error_code": err.name.upper().replace(" ", "_"), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"success": False, "error_code": "INTERNAL_SERVER_ERROR",
                    "message": "An unexpected server error occurred"}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
