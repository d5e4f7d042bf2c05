"""
User Directory
Approver lookups used when materializing approval tasks
"""

from sqlalchemy.orm import Session
from typing import Iterable, List, Optional

from ideaflow.models.user import User, UserRole
from ideaflow.utils.logger import setup_logger

logger = setup_logger()


class UserDirectory:
    """Tenant-scoped user queries"""

    def active_users_with_roles(
        self,
        db: Session,
        tenant_id: int,
        roles: Iterable[str]
    ) -> List[User]:
        """
        Every active user holding any of the given roles

        Args:
            db: Database session
            tenant_id: Tenant to search
            roles: Role identifiers; unknown identifiers are ignored

        Returns:
            List of users ordered by id
        """
        known_roles = []
        for role in roles:
            try:
                known_roles.append(UserRole(role))
            except ValueError:
                logger.warning(f"Ignoring unknown approver role '{role}' for tenant {tenant_id}")

        if not known_roles:
            return []

        return db.query(User).filter(
            User.tenant_id == tenant_id,
            User.role.in_(known_roles),
            User.is_active == True
        ).order_by(User.id).all()

    def get_user(self, db: Session, tenant_id: int, user_id: int) -> Optional[User]:
        """Fetch a user of the tenant by id"""
        return db.query(User).filter(
            User.id == user_id,
            User.tenant_id == tenant_id
        ).first()


# Create singleton instance
user_directory = UserDirectory()
