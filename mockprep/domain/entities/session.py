from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    user_id: str
    token: str

    @property
    def auth_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}
