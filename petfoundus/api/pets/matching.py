# petfoundus/api/pets/matching.py
"""
입양자 선호도와 반려동물 정보를 비교해 0~100점의 궁합 점수를 계산합니다.

배점: 크기 30 / 성격 40 / 나이대 20 / 생활환경 30 / 경험 10
(선호도를 지정하지 않은 항목은 만점에서 제외)
"""
import math
from typing import Dict, Any, List

from petfoundus.models.adopter import ExperienceLevel
from petfoundus.models.pet import Pet, PetSize


def age_group(total_months: int) -> str:
    if total_months < 12:
        return "Puppy"
    if total_months < 36:
        return "Young"
    if total_months < 96:
        return "Adult"
    return "Senior"


def preferences_complete(prefs: Dict[str, Any]) -> bool:
    return bool(prefs.get('preferred_size') and prefs.get('preferred_temperament')
                and prefs.get('preferred_age') and prefs.get('experience_level'))


def compatibility_score(pet: Pet, prefs: Dict[str, Any]) -> int:
    score = 0.0
    max_score = 0

    preferred_size = prefs.get('preferred_size') or []
    if preferred_size:
        max_score += 30
        if pet.size.value in preferred_size:
            score += 30

    preferred_temperament = prefs.get('preferred_temperament') or []
    if preferred_temperament:
        max_score += 40
        matching = [t for t in pet.labels['temperament'] if t in preferred_temperament]
        score += len(matching) / len(preferred_temperament) * 40

    preferred_age = prefs.get('preferred_age') or []
    if preferred_age:
        max_score += 20
        if age_group(pet.total_age_months) in preferred_age:
            score += 20

    # 생활환경
    max_score += 30
    good_with = pet.labels['good_with']
    is_large = pet.size == PetSize.LARGE
    if prefs.get('has_children') and 'Children' in good_with:
        score += 10
    if prefs.get('has_other_pets') and ('Other Dogs' in good_with or 'Other Cats' in good_with):
        score += 10
    if is_large and prefs.get('has_garden'):
        score += 10

    experience = prefs.get('experience_level')
    if experience:
        max_score += 10
        if experience == ExperienceLevel.EXPERIENCED.value:
            score += 10
        elif experience == ExperienceLevel.SOME_EXPERIENCE.value:
            score += 7
        elif experience == ExperienceLevel.FIRST_TIME.value and not pet.special_needs and not is_large:
            score += 10

    if experience == ExperienceLevel.FIRST_TIME.value and is_large:
        score -= 5

    if max_score == 0:
        return 0
    # 0.5는 올림 (half-up)
    return max(0, math.floor(score / max_score * 100 + 0.5))


def rank_pets(pets: List[Pet], prefs: Dict[str, Any]) -> List[tuple]:
    """(pet, score) 목록을 점수 내림차순으로 반환합니다. 동점이면 입력 순서를 유지합니다."""
    scored = [(pet, compatibility_score(pet, prefs)) for pet in pets]
    return sorted(scored, key=lambda item: item[1], reverse=True)
