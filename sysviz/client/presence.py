import random
from typing import Dict, List, Optional

COLORS = ["#1a73e8", "#e37400", "#1e8e3e", "#d93025", "#9334e6", "#0097a7"]


class RemoteUser:
    """Курсор другого участника, живёт пока открыт его сокет"""

    def __init__(self, id: str, name: str, color: str, position: Dict[str, float]):
        self.id = id
        self.name = name
        self.color = color
        self.position = position

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "position": dict(self.position)
        }

    def __repr__(self) -> str:
        return f"RemoteUser(id={self.id}, name={self.name}, position={self.position})"


class PresenceTracker:
    """Набор удалённых курсоров по идентификатору сессии"""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()
        self._users: Dict[str, RemoteUser] = {}

    def upsert(self, user_id: str, name: str, position: Dict[str, float]) -> RemoteUser:
        user = self._users.get(user_id)
        if user is None:
            # Цвет выбирается один раз, совпадения между участниками допустимы
            user = RemoteUser(user_id, name, self._rng.choice(COLORS), dict(position))
            self._users[user_id] = user
        else:
            user.name = name
            user.position = dict(position)
        return user

    def remove(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None

    def clear(self) -> None:
        self._users.clear()

    def get(self, user_id: str) -> Optional[RemoteUser]:
        return self._users.get(user_id)

    @property
    def users(self) -> List[RemoteUser]:
        return list(self._users.values())

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._users

    def __len__(self) -> int:
        return len(self._users)
