# petfoundus/utils/image_utils.py
"""
문서에 인라인으로 저장하는 이미지(bytes)를 다루는 유틸리티.
신고 사진과 입양 후 근황 사진은 Firestore 문서 안에 바이너리로 저장되므로,
1MiB 문서 한도를 넘지 않도록 크기를 검증하고 응답 시 data URL로 변환합니다.
"""

import base64
from typing import Optional, List, Dict, Any

ALLOWED_IMAGE_TYPES = ('image/jpeg', 'image/png', 'image/gif', 'image/webp')


def to_data_url(data: Optional[bytes], content_type: Optional[str]) -> Optional[str]:
    """바이너리 이미지를 'data:<mime>;base64,...' 문자열로 변환합니다."""
    if not data:
        return None
    encoded = base64.b64encode(bytes(data)).decode('ascii')
    return f"data:{content_type or 'application/octet-stream'};base64,{encoded}"


def read_uploads(files: List[Any], max_total_bytes: int) -> List[Dict[str, Any]]:
    """
    werkzeug FileStorage 목록을 {'data', 'content_type'} 딕셔너리 목록으로 읽어들입니다.

    :raises ValueError: 허용되지 않은 형식이거나 총 크기가 한도를 넘는 경우
    """
    images = []
    total = 0
    for storage in files:
        if storage is None or not storage.filename:
            continue
        content_type = storage.mimetype or ''
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise ValueError(f"Unsupported image type: {content_type or 'unknown'}")
        data = storage.read()
        total += len(data)
        if total > max_total_bytes:
            raise ValueError(f"Images exceed the {max_total_bytes // 1024} KiB limit")
        images.append({'data': data, 'content_type': content_type})
    return images
