# petfoundus/models/chat_history.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict


@dataclass
class ChatHistory:
    """
    챗봇 대화 기록 ('chat_histories' 컬렉션).
    로그인 사용자는 user_id, 비로그인 사용자는 session_id로 식별합니다.
    messages 항목: {role: 'user' | 'assistant', content}
    """
    history_id: str
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    messages: List[Dict[str, str]] = field(default_factory=list)
    updated_at: Optional[datetime] = None

    def append(self, role: str, content: str, limit: int):
        """메시지를 추가하고 가장 최근 limit개만 남깁니다."""
        self.messages.append({"role": role, "content": content})
        if len(self.messages) > limit:
            self.messages = self.messages[-limit:]
