"""
Authentication Service
Resolves the calling user from a bearer token and checks approval rights
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from ideaflow.config.database import get_db
from ideaflow.models.approval import ApprovalTask
from ideaflow.models.user import User
from ideaflow.utils.security import decode_token
from ideaflow.utils.logger import setup_logger

logger = setup_logger()

# Tokens are issued by the identity provider; no login endpoint lives here
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


class AuthService:
    """Authentication service"""

    def get_current_user(
        self,
        token: str = Depends(oauth2_scheme),
        db: Session = Depends(get_db)
    ) -> User:
        """
        Get current authenticated user from token

        Args:
            token: JWT token carrying ``sub`` (user id) and ``tenant_id``
            db: Database session

        Returns:
            User: Current user

        Raises:
            HTTPException: If authentication fails
        """
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

        payload = decode_token(token)
        if payload is None:
            raise credentials_exception

        user_id = payload.get("sub")
        tenant_id = payload.get("tenant_id")
        if user_id is None or tenant_id is None:
            raise credentials_exception

        try:
            user_id = int(user_id)
            tenant_id = int(tenant_id)
        except (TypeError, ValueError):
            raise credentials_exception

        user = db.query(User).filter(
            User.id == user_id,
            User.tenant_id == tenant_id
        ).first()
        if user is None:
            raise credentials_exception

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User account is inactive"
            )

        return user

    def can_decide(self, user: User, task: ApprovalTask) -> bool:
        """Only the task's designated approver or an administrator may decide it"""
        return task.approver_id == user.id or user.is_admin


# Create singleton instance
auth_service = AuthService()
