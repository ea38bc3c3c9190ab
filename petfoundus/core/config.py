# petfoundus/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.
from datetime import timedelta


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명 키. 입양자/보호소 로그인 토큰의 위변조를 방지합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES_HOURS', 12)))

    # OpenAI (라벨 추천, 챗봇)
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
    OPENAI_TIMEOUT = float(os.getenv('OPENAI_TIMEOUT', 30))
    OPENAI_MAX_RETRIES = int(os.getenv('OPENAI_MAX_RETRIES', 2))

    # 챗봇 대화 기록은 최근 N개 메시지만 보관합니다.
    CHAT_HISTORY_LIMIT = int(os.getenv('CHAT_HISTORY_LIMIT', 20))

    # 주변 동물병원 검색
    VET_CLINIC_MAX_DISTANCE_M = int(os.getenv('VET_CLINIC_MAX_DISTANCE_M', 8000))
    VET_CLINIC_RESULT_LIMIT = int(os.getenv('VET_CLINIC_RESULT_LIMIT', 10))

    # 문서에 인라인 저장되는 이미지의 총 크기 (Firestore 문서 한도 1MiB 이하)
    MAX_INLINE_IMAGE_BYTES = int(os.getenv('MAX_INLINE_IMAGE_BYTES', 900 * 1024))
    MAX_PET_UPDATE_IMAGES = int(os.getenv('MAX_PET_UPDATE_IMAGES', 5))
    MAX_CONTENT_LENGTH = 8 * 1024 * 1024

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # 공개 연락처. 특정 보호소 문서(isAdmin)에 의존하지 않고 설정으로 관리합니다.
    PUBLIC_CONTACT_NAME = os.getenv('PUBLIC_CONTACT_NAME', 'PET Found Us')
    PUBLIC_CONTACT_EMAIL = os.getenv('PUBLIC_CONTACT_EMAIL', 'admin@petfoundus.com')
    PUBLIC_CONTACT_PHONE = os.getenv('PUBLIC_CONTACT_PHONE')


class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')


class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    # 테스트에서는 실제 키 없이도 앱이 생성되도록 기본값을 둡니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'test-jwt-secret-key-with-32-bytes!!')
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY', 'test-openai-key')


class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')


# FLASK_ENV 값에 따라 create_app에서 적절한 설정을 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
