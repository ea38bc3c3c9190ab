# petfoundus/services/openai_service.py
import json
import logging
import re
from typing import Optional, Dict, Any, List
from flask import Flask
from openai import OpenAI, OpenAIError

from petfoundus.models.pet import TEMPERAMENT_LABELS, GOOD_WITH_LABELS

CHATBOT_SYSTEM_PROMPT = (
    "You are the PET Found Us assistant for a pet adoption platform in Malaysia. "
    "Help users with adopting dogs and cats, preparing their home, basic pet care, "
    "vaccination schedules and reporting stray animals. Keep answers short and friendly. "
    "For medical emergencies always recommend visiting a veterinarian."
)

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class OpenAIService:
    """
    OpenAI API 연동을 담당하는 서비스 클래스.
    반려동물 성격 라벨 추천과 챗봇 응답 생성을 제공합니다.
    """

    def __init__(self):
        """
        OpenAI 클라이언트를 None으로 초기화합니다.
        실제 클라이언트는 init_app 메서드를 통해 설정됩니다.
        """
        self.client = None
        self.model = None

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 OpenAI 클라이언트를 설정합니다.
        요청이 무한정 대기하지 않도록 timeout과 재시도 횟수를 설정에서 읽어옵니다.

        :param app: Flask 애플리케이션 객체
        """
        api_key = app.config.get('OPENAI_API_KEY')
        if not api_key:
            raise ValueError("OPENAI_API_KEY 설정이 .env 파일에 필요합니다.")

        self.client = OpenAI(
            api_key=api_key,
            timeout=app.config.get('OPENAI_TIMEOUT', 30),
            max_retries=app.config.get('OPENAI_MAX_RETRIES', 2),
        )
        self.model = app.config.get('OPENAI_MODEL', 'gpt-4o-mini')
        logging.info("OpenAIService: OpenAI API 서비스가 성공적으로 초기화되었습니다.")

    def _complete(self, messages: List[Dict[str, str]], temperature: float, max_tokens: int) -> str:
        if not self.client:
            raise RuntimeError("OpenAIService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except OpenAIError as e:
            logging.error(f"OpenAI chat completion failed: {e}", exc_info=True)
            raise RuntimeError("AI service is unavailable. Please try again later.") from e
        return (response.choices[0].message.content or "").strip()

    def suggest_labels(self, description: str, species: str,
                       breed: Optional[str] = None, name: Optional[str] = None) -> Dict[str, List[str]]:
        """
        반려동물 설명을 바탕으로 성격(temperament)과 어울리는 대상(good_with) 라벨을 추천합니다.
        모델 응답은 허용된 라벨 목록으로 필터링됩니다.

        :raises RuntimeError: API 호출 실패 또는 JSON 파싱 실패
        """
        prompt = self._build_label_prompt(description, species, breed, name)
        raw = self._complete(
            [
                {"role": "system", "content": "You are an expert in animal behavior. You reply with JSON only."},
                {"role": "user", "content": prompt},
            ],
            temperature=0.3,
            max_tokens=200,
        )
        cleaned = _FENCE_PATTERN.sub("", raw).strip()
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logging.warning(f"AI label suggestion returned non-JSON content: {raw[:200]}")
            raise RuntimeError("AI returned invalid format. Please try again.") from e
        if not isinstance(parsed, dict):
            raise RuntimeError("AI returned invalid format. Please try again.")

        return {
            "temperament": self._filter_labels(parsed.get("temperament"), TEMPERAMENT_LABELS),
            "good_with": self._filter_labels(parsed.get("good_with"), GOOD_WITH_LABELS),
        }

    @staticmethod
    def _filter_labels(values: Any, allowed: List[str]) -> List[str]:
        if not isinstance(values, list):
            return []
        # 원래 순서를 유지하며 중복 제거
        return [label for label in dict.fromkeys(values) if label in allowed]

    @staticmethod
    def _build_label_prompt(description: str, species: str, breed: Optional[str], name: Optional[str]) -> str:
        return f"""
        Based on this {species.lower()} description, suggest appropriate personality and compatibility labels.

        Pet name: {name or 'Unknown'}
        Breed: {breed or 'Unknown'}
        Description: {description}

        Choose ONLY from these options:
        Temperament: {', '.join(TEMPERAMENT_LABELS)}
        Good with: {', '.join(GOOD_WITH_LABELS)}

        Respond in this exact JSON format:
        {{"temperament": ["label1", "label2"], "good_with": ["label1"]}}

        Select 1-3 temperament labels and 1-4 good_with labels that best match the description.
        """

    def chat_reply(self, history: List[Dict[str, str]]) -> str:
        """
        대화 기록(role/content 목록)을 받아 챗봇 응답 텍스트를 반환합니다.

        :raises RuntimeError: API 호출 실패
        """
        messages = [{"role": "system", "content": CHATBOT_SYSTEM_PROMPT}]
        messages.extend({"role": m["role"], "content": m["content"]} for m in history)
        reply = self._complete(messages, temperature=0.7, max_tokens=500)
        if not reply:
            raise RuntimeError("AI returned an empty reply. Please try again.")
        return reply
