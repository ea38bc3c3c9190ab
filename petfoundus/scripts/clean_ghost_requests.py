# petfoundus/scripts/clean_ghost_requests.py
"""
삭제된 반려동물을 가리키는 입양 요청을 정리합니다.

    python -m petfoundus.scripts.clean_ghost_requests
"""
from petfoundus import create_app


def main():
    app = create_app()
    with app.app_context():
        removed = app.services['adoption_requests'].clean_ghost_requests()
    print(f"Removed {removed} ghost adoption requests")
    return removed


if __name__ == '__main__':
    main()
