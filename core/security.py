import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLES = {ROLE_ADMIN, ROLE_USER}

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class TokenRegistry:
    """
    Opaque bearer tokens mapped to identities.

    Token issuance lives elsewhere; this only validates what it was given:
    ``{"<token>": {"userId": "...", "role": "admin" | "user"}}``.
    """

    def __init__(self, tokens: Optional[Dict[str, Identity]] = None) -> None:
        self._tokens = dict(tokens or {})

    @classmethod
    def from_mapping(cls, raw: dict) -> "TokenRegistry":
        tokens: Dict[str, Identity] = {}
        for token, entry in (raw or {}).items():
            role = str(entry.get("role", ROLE_USER)).lower()
            if role not in ROLES:
                logger.warning("Ignoring token with unknown role %r", role)
                continue
            user_id = str(entry.get("userId") or entry.get("user_id") or "")
            if not user_id:
                logger.warning("Ignoring token without userId")
                continue
            tokens[token] = Identity(user_id=user_id, role=role)
        return cls(tokens)

    @classmethod
    def from_settings(cls, settings) -> "TokenRegistry":
        raw = dict(settings.auth_tokens or {})
        path: Optional[Path] = settings.auth_tokens_file
        if path is not None:
            # A broken tokens file must fail startup, not silently lock everyone out.
            raw.update(json.loads(Path(path).read_text(encoding="utf-8")))
        return cls.from_mapping(raw)

    def resolve(self, token: str) -> Optional[Identity]:
        return self._tokens.get(token)


def require_auth(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    registry: TokenRegistry = request.app.state.tokens
    identity = registry.resolve(credentials.credentials)
    if identity is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return identity


def require_admin(identity: Identity = Depends(require_auth)) -> Identity:
    if not identity.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return identity


def require_user(identity: Identity = Depends(require_auth)) -> Identity:
    """Any signed-in role. The registry only admits known roles, so this adds no check."""
    return identity
