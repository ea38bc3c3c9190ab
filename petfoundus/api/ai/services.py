# petfoundus/api/ai/services.py
import logging
import uuid
from typing import Dict, Any, Optional
from firebase_admin import firestore

from petfoundus.models.chat_history import ChatHistory
from petfoundus.services.openai_service import OpenAIService
from petfoundus.utils.datetime_utils import DateTimeUtils
from petfoundus.services.firestore_service import to_document, snapshot_to_dict


class ChatService:
    """
    챗봇 대화 서비스.
    로그인한 입양자는 adopter id로, 비로그인 사용자는 session_id로 대화 기록을 이어갑니다.
    """

    def __init__(self, openai_service: OpenAIService, history_limit: int = 20):
        self.db = firestore.client()
        self.histories_ref = self.db.collection('chat_histories')
        self.openai_service = openai_service
        self.history_limit = history_limit

    @staticmethod
    def _history_id(user_id: Optional[str], session_id: str) -> str:
        return f"user_{user_id}" if user_id else f"session_{session_id}"

    def reply(self, message: str, user_id: Optional[str] = None, session_id: Optional[str] = None) -> Dict[str, Any]:
        """
        사용자 메시지에 대한 챗봇 응답을 생성하고 대화 기록을 저장합니다.
        AI 호출이 실패하면 기록은 변경되지 않습니다.

        :raises RuntimeError: AI 응답 생성 실패
        """
        session_id = session_id or str(uuid.uuid4())
        history_id = self._history_id(user_id, session_id)
        ref = self.histories_ref.document(history_id)

        stored = snapshot_to_dict(ref.get())
        history = ChatHistory(
            history_id=history_id,
            user_id=user_id,
            session_id=session_id,
            messages=list((stored or {}).get('messages') or []),
        )
        history.append("user", message, self.history_limit)

        answer = self.openai_service.chat_reply(history.messages)

        history.append("assistant", answer, self.history_limit)
        history.updated_at = DateTimeUtils.now()
        ref.set(to_document(history))
        logging.info(f"Chat reply generated for {history_id} ({len(history.messages)} messages stored)")
        return {"reply": answer, "session_id": session_id}
