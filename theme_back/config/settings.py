import os
from pathlib import Path

import environ
from corsheaders.defaults import default_headers
from dotenv import load_dotenv

from .base import *  # 공통 설정

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

# .env → 환경변수 (없으면 base.py 기본값)
env = environ.Env(
    DEBUG=(bool, False),
    THEME_HOME_PAGE=(str, THEME_HOME_PAGE),
)
environ.Env.read_env(os.path.join(BASE_DIR, '.env'))

SECRET_KEY = env('SECRET_KEY', default=SECRET_KEY)
DEBUG = env('DEBUG')

# 운영 서버는 .env 의 ALLOWED_HOSTS 로 지정
ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', default=['127.0.0.1', 'localhost', 'testserver'])

# DATABASE_URL 예: postgres://user:pass@db:5432/lms (미지정 시 sqlite)
DATABASES = {
    'default': env.db('DATABASE_URL', default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}"),
}

STATIC_ROOT = BASE_DIR / 'static'
# 로고, 파비콘, 슬라이드, 강좌 커버 이미지 업로드 위치
MEDIA_ROOT = Path(env('MEDIA_ROOT', default=str(BASE_DIR / 'media')))

SITE_NAME = env('SITE_NAME', default=SITE_NAME)
THEME_HOME_PAGE = env('THEME_HOME_PAGE')

# 메뉴/설정 API 를 호출하는 프론트 오리진 (세션 쿠키 포함)
CORS_ALLOWED_ORIGINS = env.list(
    'CORS_ALLOWED_ORIGINS',
    default=['http://localhost:5173', 'http://127.0.0.1:5173'],
)
CORS_ALLOW_HEADERS = list(default_headers) + ['x-csrftoken']
CORS_ALLOW_CREDENTIALS = True

SPECTACULAR_SETTINGS = {
    'TITLE': 'LMS Theme API',
    'DESCRIPTION': '테마 설정, 헤더 카테고리 메뉴 API',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
}
